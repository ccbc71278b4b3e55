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

"""Chunk size calculation for segmented (multipart) uploads"""

import collections

from oslo_log import log as logging
from oslo_utils import units

from swiftseg.common import exception
from swiftseg.i18n import _

LOG = logging.getLogger(__name__)

DEFAULT_PART_SIZE = 32 * units.Mi
DEFAULT_MAX_PART_COUNT = 10000
MAX_SWIFT_OBJECT_SIZE = 5 * units.Gi


SlicingPlan = collections.namedtuple('SlicingPlan',
                                     ['chunk_size', 'part_count', 'remainder'])
SlicingPlan.__doc__ = """How a payload is cut into parts.

``part_count`` full parts of ``chunk_size`` bytes are followed by one part
of ``remainder`` bytes when ``remainder`` is non-zero. A ``part_count`` of 0
means the payload is written as a single object.
"""


class SlicingAlgorithm(object):
    """Computes a :class:`SlicingPlan` for a payload of known length.

    Parts are ``default_chunk_size`` bytes unless that would need more than
    ``max_part_count`` full parts, in which case the chunk size grows just
    enough to stay within the bound.

    :param default_chunk_size: preferred size of a part, in bytes
    :param max_part_count: maximum number of full-size parts
    :param max_part_size: largest chunk the provider accepts, in bytes, or
                          None for no limit
    """

    def __init__(self, default_chunk_size=DEFAULT_PART_SIZE,
                 max_part_count=DEFAULT_MAX_PART_COUNT, max_part_size=None):
        if default_chunk_size < 1:
            reason = _("default chunk size must be positive, got %s"
                       ) % default_chunk_size
            raise exception.InvalidArgument(reason=reason)
        if max_part_count < 1:
            reason = _("maximum part count must be positive, got %s"
                       ) % max_part_count
            raise exception.InvalidArgument(reason=reason)
        if max_part_size is not None and max_part_size < default_chunk_size:
            reason = (_("maximum part size %(max)d is smaller than the "
                        "default chunk size %(default)d") %
                      {'max': max_part_size, 'default': default_chunk_size})
            raise exception.InvalidArgument(reason=reason)
        self.default_chunk_size = default_chunk_size
        self.max_part_count = max_part_count
        self.max_part_size = max_part_size

    def calculate_plan(self, content_length):
        """Return the :class:`SlicingPlan` for ``content_length`` bytes.

        :raises: InvalidArgument if content_length is not a non-negative
                 integer, or if the payload cannot be split into at most
                 max_part_count parts of at most max_part_size bytes
        """
        if (content_length is None or isinstance(content_length, bool) or
                not isinstance(content_length, int)):
            reason = _("content length must be an integer, got %r"
                       ) % (content_length,)
            raise exception.InvalidArgument(reason=reason)
        if content_length < 0:
            reason = _("content length must not be negative, got %d"
                       ) % content_length
            raise exception.InvalidArgument(reason=reason)

        if content_length <= self.default_chunk_size:
            return SlicingPlan(content_length, 0, 0)

        chunk_size = self.default_chunk_size
        part_count, remainder = divmod(content_length, chunk_size)
        if part_count > self.max_part_count:
            # ceil(content_length / max_part_count)
            chunk_size = -(-content_length // self.max_part_count)
            part_count, remainder = divmod(content_length, chunk_size)
            LOG.debug("Raised chunk size to %(chunk_size)d to keep "
                      "%(content_length)d bytes within %(max)d parts",
                      {'chunk_size': chunk_size,
                       'content_length': content_length,
                       'max': self.max_part_count})

        if self.max_part_size is not None and chunk_size > self.max_part_size:
            reason = (_("%(content_length)d bytes cannot be stored in "
                        "%(max_parts)d parts of at most %(max_size)d bytes") %
                      {'content_length': content_length,
                       'max_parts': self.max_part_count,
                       'max_size': self.max_part_size})
            raise exception.InvalidArgument(reason=reason)

        return SlicingPlan(chunk_size, part_count, remainder)
