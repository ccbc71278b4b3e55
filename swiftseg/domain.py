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

import collections


class SwiftObject(object):
    """A named object ready to be written to a container."""

    def __init__(self, name, payload, headers=None):
        self.name = name
        self.payload = payload
        self.headers = dict(headers or {})

    def __repr__(self):
        return '<SwiftObject %s (%s bytes)>' % (self.name,
                                                self.payload.content_length)


class PutOptions(object):
    """
    Options for a single put.

    :param multipart: write the payload as a segmented object even when it
                      is smaller than the configured large object size
    :param headers: extra request headers applied to every object written
    """

    def __init__(self, multipart=False, headers=None):
        self.multipart = multipart
        self.headers = dict(headers or {})

    @classmethod
    def multipart_upload(cls, **kwargs):
        return cls(multipart=True, **kwargs)


Part = collections.namedtuple('Part', ['number', 'name', 'size', 'etag'])
