# Copyright 2026 OpenStack Foundation
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Object store client and store facade for OpenStack Swift"""

import functools
import http.client as http

from oslo_config import cfg
from oslo_log import log as logging
from oslo_utils import encodeutils
from oslo_utils import units
import swiftclient
from swiftclient import client as swift_client

from swiftseg.common import exception
from swiftseg import domain
from swiftseg.i18n import _, _LE
from swiftseg import slicing
from swiftseg import upload

LOG = logging.getLogger(__name__)

DEFAULT_CONTAINER = 'swiftseg'
DEFAULT_LARGE_OBJECT_SIZE = 5 * units.Ki  # 5GB
DEFAULT_LARGE_OBJECT_CHUNK_SIZE = 32  # 32M
ONE_MB = units.Mi
# Swift joins DLO segments in listing (lexicographic) order
DEFAULT_PART_NUMBER_WIDTH = 8

swift_opts = [
    cfg.StrOpt('auth_address',
               help=_("The address where the Swift authentication service "
                      "is listening. Addresses without a scheme use "
                      "https.")),
    cfg.StrOpt('user', secret=True,
               help=_("The user to authenticate against the Swift "
                      "authentication service. Use tenant:user with "
                      "auth versions 2 and 3.")),
    cfg.StrOpt('key', secret=True,
               help=_("Auth key for the user authenticating against the "
                      "Swift authentication service.")),
    cfg.StrOpt('auth_version', default='3',
               choices=('1', '2', '3'),
               help=_("Version of the authentication service to use.")),
    cfg.StrOpt('region',
               help=_("The region of Swift endpoint to use.")),
    cfg.BoolOpt('insecure', default=False,
                help=_("Skip server certificate verification.")),
    cfg.IntOpt('retries', default=0, min=0,
               help=_("Number of times swiftclient retries a failed "
                      "request. Segmented uploads never retry on their "
                      "own.")),
    cfg.IntOpt('timeout', min=1,
               help=_("Socket timeout in seconds for Swift requests.")),
    cfg.StrOpt('container', default=DEFAULT_CONTAINER,
               help=_("Default container objects are written to.")),
    cfg.BoolOpt('create_container_on_put', default=False,
                help=_("Create the destination container when it does "
                       "not exist.")),
    cfg.IntOpt('large_object_size', default=DEFAULT_LARGE_OBJECT_SIZE,
               min=1,
               help=_("Size in MB above which objects are always written "
                      "as segmented objects.")),
    cfg.IntOpt('large_object_chunk_size',
               default=DEFAULT_LARGE_OBJECT_CHUNK_SIZE, min=1,
               help=_("Preferred size in MB of each segment of a "
                      "segmented object.")),
    cfg.IntOpt('large_object_max_parts',
               default=slicing.DEFAULT_MAX_PART_COUNT, min=1,
               help=_("Maximum number of full-size segments. The segment "
                      "size grows for payloads that would need more.")),
    cfg.StrOpt('part_separator', default=upload.DEFAULT_SEPARATOR,
               help=_("Separator between an object name and the number of "
                      "each of its segments.")),
    cfg.IntOpt('part_number_width', default=DEFAULT_PART_NUMBER_WIDTH,
               min=0,
               help=_("Zero-pad segment numbers to this many digits so "
                      "that Swift lists, and therefore joins, segments in "
                      "order. 0 disables padding, which is only safe for "
                      "objects of at most nine segments.")),
    cfg.IntOpt('upload_pool_size', default=1, min=1,
               help=_("Number of segments uploaded concurrently. 1 uploads "
                      "segments one after the other.")),
]

CONF = cfg.CONF
CONF.register_opts(swift_opts, group='swift')


def _from_client_exception(e):
    reason = encodeutils.exception_to_unicode(e)
    status = getattr(e, 'http_status', None)
    if status is None:
        return exception.TransportError(reason=reason)
    if status == http.NOT_FOUND:
        return exception.NotFound(http_status=status, reason=reason)
    if status == http.CONFLICT:
        return exception.Conflict(http_status=status, reason=reason)
    return exception.ProviderError(http_status=status, reason=reason)


def translate_errors(func):
    """Raise swiftclient and socket failures as swiftseg exceptions."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except swiftclient.ClientException as e:
            raise _from_client_exception(e)
        except OSError as e:
            raise exception.TransportError(
                reason=encodeutils.exception_to_unicode(e))
    return wrapper


class ObjectClient(object):
    """Object store operations on top of a swiftclient connection."""

    def __init__(self, connection, separator=upload.DEFAULT_SEPARATOR):
        self.connection = connection
        self.separator = separator

    @translate_errors
    def put_object(self, container, swift_object, options=None):
        """Write one object and return its ETag."""
        payload = swift_object.payload
        headers = payload.metadata.to_headers()
        headers.update(swift_object.headers)
        if options is not None:
            headers.update(options.headers)
        with payload.open() as reader:
            return self.connection.put_object(
                container, swift_object.name, reader,
                content_length=payload.content_length,
                content_type=payload.metadata.content_type,
                headers=headers)

    @translate_errors
    def put_object_manifest(self, container, object_key, headers=None):
        """
        Write a manifest at ``object_key`` covering every object whose name
        starts with ``object_key`` followed by the part separator.
        """
        manifest_headers = dict(headers or {})
        manifest_headers['X-Object-Manifest'] = '%s/%s%s' % (
            container, object_key, self.separator)
        return self.connection.put_object(container, object_key, None,
                                          content_length=0,
                                          headers=manifest_headers)

    @translate_errors
    def head_object(self, container, object_key):
        return self.connection.head_object(container, object_key)

    @translate_errors
    def list_parts(self, container, object_key):
        """Return the parts stored for ``object_key``, by part number."""
        prefix = object_key + self.separator
        _headers, listing = self.connection.get_container(
            container, prefix=prefix, full_listing=True)
        parts = []
        for entry in listing:
            suffix = entry['name'][len(prefix):]
            if not suffix.isdigit():
                continue
            parts.append(domain.Part(int(suffix), entry['name'],
                                     entry.get('bytes'), entry.get('hash')))
        return sorted(parts)

    @translate_errors
    def remove_object(self, container, object_key):
        self.connection.delete_object(container, object_key)

    def delete_object(self, container, object_key):
        """
        Delete ``object_key``. When it is a manifest, its segments are
        deleted first and the manifest last.

        :raises: NotFound if the object does not exist
        """
        headers = self.head_object(container, object_key)
        manifest = headers.get('x-object-manifest')
        if manifest:
            obj_container, obj_prefix = manifest.split('/', 1)
            segments = self._list_prefix(obj_container, obj_prefix)
            for name in segments:
                LOG.debug("Deleting segment %(container)s/%(name)s",
                          {'container': obj_container, 'name': name})
                self.remove_object(obj_container, name)
        self.remove_object(container, object_key)

    @translate_errors
    def _list_prefix(self, container, prefix):
        _headers, listing = self.connection.get_container(
            container, prefix=prefix, full_listing=True)
        return [entry['name'] for entry in listing]

    def create_container_if_missing(self, container, create=False):
        """
        Creates a missing container if ``create`` is set.

        :raises: NotFound if the container is missing and ``create`` is off
        """
        try:
            self.connection.head_container(container)
        except swiftclient.ClientException as e:
            if e.http_status != http.NOT_FOUND:
                raise _from_client_exception(e)
            if not create:
                reason = (_("The container %(container)s does not exist. "
                            "Set the create_container_on_put option to "
                            "create it automatically.") %
                          {'container': container})
                raise exception.NotFound(http_status=e.http_status,
                                         reason=reason)
            try:
                self.connection.put_container(container)
            except swiftclient.ClientException as e:
                raise _from_client_exception(e)
        except OSError as e:
            raise exception.TransportError(
                reason=encodeutils.exception_to_unicode(e))


class Store(object):
    """Writes and deletes objects in Swift using the ``[swift]`` options."""

    def __init__(self, conf=None, connection=None):
        """
        :param conf: oslo.config object holding the ``[swift]`` group
        :param connection: swiftclient connection to use instead of one
                           built from the configured credentials
        """
        self.conf = conf or CONF
        self.configure()
        if connection is None:
            connection = self._make_swift_connection()
        self.client = ObjectClient(connection, separator=self.separator)
        self.uploader = self._make_uploader()

    def configure(self):
        opts = self.conf.swift
        self.container = opts.container
        self.create_container_on_put = opts.create_container_on_put
        self.auth_version = opts.auth_version
        self.region = opts.region
        self.insecure = opts.insecure
        self.retries = opts.retries
        self.timeout = opts.timeout
        self.separator = opts.part_separator
        self.part_number_width = opts.part_number_width
        self.pool_size = opts.upload_pool_size
        # The options are in MB, payload lengths are in bytes.
        self.large_object_size = opts.large_object_size * ONE_MB
        self.large_object_chunk_size = opts.large_object_chunk_size * ONE_MB
        self.large_object_max_parts = opts.large_object_max_parts

        if not self.separator:
            reason = _("part_separator must not be empty")
            raise exception.BadStoreConfiguration(store_name="swift",
                                                  reason=reason)
        if self.large_object_chunk_size > slicing.MAX_SWIFT_OBJECT_SIZE:
            reason = (_("large_object_chunk_size exceeds the Swift object "
                        "size limit of %d bytes") %
                      slicing.MAX_SWIFT_OBJECT_SIZE)
            raise exception.BadStoreConfiguration(store_name="swift",
                                                  reason=reason)

    def _option_get(self, param):
        result = getattr(self.conf.swift, param)
        if not result:
            reason = (_("Could not find %(param)s in configuration "
                        "options.") % {'param': param})
            LOG.error(reason)
            raise exception.BadStoreConfiguration(store_name="swift",
                                                  reason=reason)
        return result

    def _make_swift_connection(self):
        """Creates a connection using the Swift client library."""
        auth_address = self._option_get('auth_address')
        user = self._option_get('user')
        key = self._option_get('key')

        if auth_address.startswith(('http://', 'https://')):
            full_auth_address = auth_address
        else:
            full_auth_address = 'https://' + auth_address
        if not full_auth_address.endswith('/'):
            full_auth_address += '/'

        tenant_name = None
        if self.auth_version in ('2', '3'):
            tenant_user = user.split(':')
            if len(tenant_user) != 2:
                reason = (_("Badly formed tenant:user '%(user)s' in Swift "
                            "configuration") % {'user': user})
                LOG.error(reason)
                raise exception.BadStoreConfiguration(store_name="swift",
                                                      reason=reason)
            tenant_name, user = tenant_user

        os_options = {}
        if self.region:
            os_options['region_name'] = self.region

        LOG.debug("Creating Swift connection with "
                  "(auth_address=%(auth_address)s, user=%(user)s, "
                  "auth_version=%(auth_version)s)",
                  {'auth_address': full_auth_address, 'user': user,
                   'auth_version': self.auth_version})
        return swift_client.Connection(
            authurl=full_auth_address, user=user, key=key,
            retries=self.retries, tenant_name=tenant_name,
            os_options=os_options, auth_version=self.auth_version,
            insecure=self.insecure, timeout=self.timeout)

    def _make_uploader(self):
        algorithm = slicing.SlicingAlgorithm(
            default_chunk_size=self.large_object_chunk_size,
            max_part_count=self.large_object_max_parts,
            max_part_size=slicing.MAX_SWIFT_OBJECT_SIZE)
        kwargs = {'algorithm': algorithm,
                  'separator': self.separator,
                  'part_number_width': self.part_number_width}
        if self.pool_size > 1:
            return upload.ParallelMultipartUpload(self.client,
                                                  self.pool_size, **kwargs)
        return upload.SequentialMultipartUpload(self.client, **kwargs)

    def put(self, container, object_key, payload, options=None):
        """
        Write ``payload`` as ``object_key``.

        The payload is written as a segmented object when ``options``
        requests a multipart upload or when it is at least
        ``large_object_size`` bytes long.

        :param container: destination container, or None for the
                          configured default
        :returns: ETag of the object or of its manifest
        """
        container = container or self.container
        if not object_key:
            raise exception.InvalidArgument(
                reason=_("object key must not be empty"))
        if payload is None or payload.content_length is None:
            raise exception.InvalidArgument(
                reason=_("payload length must be known"))
        options = options or domain.PutOptions()

        self.client.create_container_if_missing(
            container, create=self.create_container_on_put)

        if options.multipart or payload.content_length >= \
                self.large_object_size:
            return self.uploader.upload_object(container, object_key,
                                               payload, options)
        return self.client.put_object(
            container, domain.SwiftObject(object_key, payload), options)

    def delete(self, container, object_key):
        """Delete ``object_key`` and, for segmented objects, its parts."""
        self.client.delete_object(container or self.container, object_key)

    def abort_upload(self, container, object_key):
        """
        Delete parts left behind by an upload of ``object_key`` that did not
        complete. The manifest, if any, is left alone.

        :returns: number of parts deleted
        """
        container = container or self.container
        parts = self.client.list_parts(container, object_key)
        for part in parts:
            try:
                self.client.remove_object(container, part.name)
            except exception.NotFound:
                LOG.debug("Part %s already gone", part.name)
            except exception.SwiftsegException:
                LOG.error(_LE("Failed to delete part %(name)s of "
                              "%(key)s"),
                          {'name': part.name, 'key': object_key})
                raise
        return len(parts)
