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

"""
Segmented uploads of large objects.

A payload larger than the default chunk size is cut into parts named
``<key>/<n>`` that are written one by one, after which a manifest object at
``<key>`` ties the parts together. Parts that were written before a failure
are left in the container; callers that need atomicity clean them up with
``swiftseg.swift.Store.abort_upload``.
"""

import futurist
from futurist import waiters
from oslo_log import log as logging
from oslo_utils import excutils

from swiftseg.common import exception
from swiftseg import domain
from swiftseg.i18n import _, _LE, _LI
from swiftseg import payload as payload_mod
from swiftseg import slicing

LOG = logging.getLogger(__name__)

DEFAULT_SEPARATOR = '/'


def part_name(object_key, part_number, separator=DEFAULT_SEPARATOR,
              width=0):
    """Name of part ``part_number`` of ``object_key``.

    ``width`` zero-pads the part number; 0 leaves it unpadded.
    """
    return '%s%s%0*d' % (object_key, separator, width, part_number)


class SequentialMultipartUpload(object):
    """Uploads a payload as ordered parts followed by a manifest.

    :param client: object store client providing ``put_object`` and
                   ``put_object_manifest``
    :param slicer: :class:`swiftseg.payload.PayloadSlicer` used to cut parts
    :param algorithm: :class:`swiftseg.slicing.SlicingAlgorithm`
    :param separator: string placed between the object key and part number
    :param part_number_width: zero-padding width of part numbers
    """

    def __init__(self, client, slicer=None, algorithm=None,
                 separator=DEFAULT_SEPARATOR, part_number_width=0):
        self.client = client
        self.slicer = slicer or payload_mod.PayloadSlicer()
        self.algorithm = algorithm or slicing.SlicingAlgorithm()
        self.separator = separator
        self.part_number_width = part_number_width

    def upload_object(self, container_name, object_key, payload,
                      upload_options=None):
        """
        Write ``payload`` to ``container_name`` as ``object_key``.

        Payloads that fit in one part are written with a single
        ``put_object``. Larger payloads are written part by part in
        increasing part number order and finalized with
        ``put_object_manifest``.

        :returns: the result of the single put, or of the manifest put
        :raises: InvalidArgument if the container or key is empty or the
                 payload length is unknown; any error raised by the client
                 is re-raised unchanged and stops the upload
        """
        self._check_arguments(container_name, object_key, payload)
        plan = self.algorithm.calculate_plan(payload.content_length)

        if plan.part_count == 0:
            LOG.debug("Adding object %(key)s (%(length)d bytes) to "
                      "container %(container)s",
                      {'key': object_key,
                       'length': payload.content_length,
                       'container': container_name})
            return self.client.put_object(
                container_name, domain.SwiftObject(object_key, payload),
                upload_options)

        total_parts = plan.part_count + (1 if plan.remainder else 0)
        parts = (self._make_part(object_key, payload, part_number, offset,
                                 length)
                 for part_number, offset, length in self._iter_ranges(plan))
        self._upload_parts(container_name, parts, total_parts,
                           upload_options)
        return self._finalize(container_name, object_key, payload,
                              total_parts)

    def _check_arguments(self, container_name, object_key, payload):
        if not container_name:
            raise exception.InvalidArgument(
                reason=_("container name must not be empty"))
        if not object_key:
            raise exception.InvalidArgument(
                reason=_("object key must not be empty"))
        if payload is None:
            raise exception.InvalidArgument(
                reason=_("payload must not be None"))
        if payload.content_length is None:
            raise exception.InvalidArgument(
                reason=_("must provide content-length to use multi-part "
                         "upload"))

    @staticmethod
    def _iter_ranges(plan):
        for index in range(plan.part_count):
            yield index + 1, index * plan.chunk_size, plan.chunk_size
        if plan.remainder > 0:
            yield (plan.part_count + 1, plan.part_count * plan.chunk_size,
                   plan.remainder)

    def _make_part(self, object_key, payload, part_number, offset, length):
        name = part_name(object_key, part_number, self.separator,
                         self.part_number_width)
        part_payload = self.slicer.slice(payload, offset, length)
        part_payload.metadata.content_disposition = name
        return domain.SwiftObject(name, part_payload)

    def _upload_parts(self, container_name, parts, total_parts,
                      upload_options):
        # parts is lazy: each part is sliced just before it is written
        for part_number, part in enumerate(parts, 1):
            self._upload_part(container_name, part, part_number, total_parts,
                              upload_options)

    def _upload_part(self, container_name, part, part_number, total_parts,
                     upload_options):
        try:
            etag = self.client.put_object(container_name, part,
                                          upload_options)
        except Exception:
            with excutils.save_and_reraise_exception():
                LOG.error(_LE("Failed to write part %(name)s "
                              "(%(number)d/%(total)d) to container "
                              "%(container)s"),
                          {'name': part.name, 'number': part_number,
                           'total': total_parts,
                           'container': container_name})
        LOG.debug("Wrote part %(name)s (%(number)d/%(total)d) of length "
                  "%(length)d returning %(etag)s",
                  {'name': part.name, 'number': part_number,
                   'total': total_parts,
                   'length': part.payload.content_length, 'etag': etag})
        return etag

    def _finalize(self, container_name, object_key, payload, total_parts):
        metadata = payload.metadata
        headers = metadata.to_headers()
        if metadata.content_type is not None:
            headers['Content-Type'] = metadata.content_type
        etag = self.client.put_object_manifest(container_name, object_key,
                                               headers=headers)
        LOG.info(_LI("Wrote manifest for %(key)s over %(total)d parts in "
                     "container %(container)s"),
                 {'key': object_key, 'total': total_parts,
                  'container': container_name})
        return etag


class ParallelMultipartUpload(SequentialMultipartUpload):
    """Uploads parts on a bounded thread pool before writing the manifest.

    Part names, sizes and the manifest are the same as for
    :class:`SequentialMultipartUpload`; only the order in which parts reach
    the store differs. The first failing part cancels every part that has
    not started yet and the manifest is not written.

    Parts are read concurrently, so the payload must be repeatable.
    """

    def __init__(self, client, pool_size, **kwargs):
        super(ParallelMultipartUpload, self).__init__(client, **kwargs)
        if pool_size < 1:
            reason = _("pool size must be positive, got %s") % pool_size
            raise exception.InvalidArgument(reason=reason)
        self.pool_size = pool_size

    def _check_arguments(self, container_name, object_key, payload):
        super(ParallelMultipartUpload, self)._check_arguments(
            container_name, object_key, payload)
        if not payload.is_repeatable:
            raise exception.InvalidArgument(
                reason=_("parallel upload requires a repeatable payload"))

    def _upload_parts(self, container_name, parts, total_parts,
                      upload_options):
        LOG.debug('Uploading %(total)d parts with a pool of %(size)d',
                  {'total': total_parts, 'size': self.pool_size})
        executor = futurist.ThreadPoolExecutor(max_workers=self.pool_size)
        try:
            numbers = {}
            for part_number, part in enumerate(parts, 1):
                future = executor.submit(self._upload_part, container_name,
                                         part, part_number, total_parts,
                                         upload_options)
                numbers[future] = part_number

            not_done = set(numbers)
            while not_done:
                done, not_done = waiters.wait_for_any(not_done)
                failed = sorted((f for f in done if f.exception() is not None),
                                key=numbers.get)
                if failed:
                    for future in not_done:
                        future.cancel()
                    failed[0].result()
        finally:
            executor.shutdown(wait=True)
