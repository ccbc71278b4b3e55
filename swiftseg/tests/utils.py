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

"""Common utilities used in testing"""

from unittest import mock

import fixtures
from oslo_config import cfg
from oslo_config import fixture as cfg_fixture
from oslo_log import log
import testtools

from swiftseg.common import config
from swiftseg.common import exception
from swiftseg import domain
from swiftseg import payload
from swiftseg.tests.unit import fixtures as swiftseg_fixtures

CONF = cfg.CONF
LOG = log.getLogger(__name__)
try:
    CONF.debug
except cfg.NoSuchOptError:
    # NOTE: when a test runs in isolation nothing has registered the logging
    # options yet, and BaseTestCase.config(debug=True) needs them.
    log.register_options(CONF)


class BaseTestCase(testtools.TestCase):

    def setUp(self):
        super(BaseTestCase, self).setUp()

        self._config_fixture = self.useFixture(cfg_fixture.Config())

        config.parse_args(args=[])
        self.addCleanup(CONF.reset)
        self.mock_object(exception, '_FATAL_EXCEPTION_FORMAT_ERRORS', True)
        self.test_dir = self.useFixture(fixtures.TempDir()).path

        # Make sure logging output is limited but still test debug formatting
        self.useFixture(swiftseg_fixtures.StandardLogging())

    def config(self, **kw):
        """
        Override some configuration values.

        The keyword arguments are the names of configuration options to
        override and their values.

        If a group argument is supplied, the overrides are applied to
        the specified configuration option group.

        All overrides are automatically cleared at the end of the current
        test by the fixtures cleanup process.
        """
        self._config_fixture.config(**kw)

    def mock_object(self, obj, attr_name, *args, **kwargs):
        """"Use python mock to mock an object attribute

        Mocks the specified objects attribute with the given value.
        Automatically performs 'addCleanup' for the mock.
        """
        patcher = mock.patch.object(obj, attr_name, *args, **kwargs)
        result = patcher.start()
        self.addCleanup(patcher.stop)
        return result


class FakeObjectClient(object):
    """
    Records the writes an uploader makes and keeps what was written.

    ``fail_on`` maps an object name to the exception raised when that name
    is written.
    """

    def __init__(self, fail_on=None):
        self.fail_on = dict(fail_on or {})
        self.calls = []
        self.objects = {}
        self.headers = {}

    def put_object(self, container, swift_object, options=None):
        self.calls.append(('put_object', container, swift_object.name))
        if swift_object.name in self.fail_on:
            raise self.fail_on[swift_object.name]
        with swift_object.payload.open() as reader:
            data = reader.read()
        self.objects[swift_object.name] = data
        self.headers[swift_object.name] = dict(
            swift_object.payload.metadata.to_headers())
        return 'etag-%s' % swift_object.name

    def put_object_manifest(self, container, object_key, headers=None):
        self.calls.append(('put_object_manifest', container, object_key))
        self.headers[object_key] = dict(headers or {})
        return 'manifest-etag-%s' % object_key

    def part_names(self):
        return [name for (call, _c, name) in self.calls
                if call == 'put_object']


def swift_object(name, data):
    return domain.SwiftObject(name, payload.BytesPayload(data))
