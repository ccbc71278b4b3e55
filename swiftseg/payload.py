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
Payloads of known (or unknown) length and the slicer that cuts them into
bounded, read-only parts.
"""

import io
import os
import threading

from oslo_log import log as logging

from swiftseg.common import exception
from swiftseg.i18n import _

LOG = logging.getLogger(__name__)

CHUNKSIZE = 65536


class ContentMetadata(object):
    """HTTP content metadata that travels with a payload."""

    def __init__(self, content_length=None, content_type=None,
                 content_disposition=None, content_encoding=None):
        self.content_length = content_length
        self.content_type = content_type
        self.content_disposition = content_disposition
        self.content_encoding = content_encoding

    def copy(self, **overrides):
        values = {'content_length': self.content_length,
                  'content_type': self.content_type,
                  'content_disposition': self.content_disposition,
                  'content_encoding': self.content_encoding}
        values.update(overrides)
        return ContentMetadata(**values)

    def to_headers(self):
        """Headers for the metadata that is not sent as a request field."""
        headers = {}
        if self.content_disposition is not None:
            headers['Content-Disposition'] = self.content_disposition
        if self.content_encoding is not None:
            headers['Content-Encoding'] = self.content_encoding
        return headers

    def __eq__(self, other):
        if not isinstance(other, ContentMetadata):
            return NotImplemented
        return vars(self) == vars(other)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return ('ContentMetadata(content_length=%(content_length)r, '
                'content_type=%(content_type)r, '
                'content_disposition=%(content_disposition)r, '
                'content_encoding=%(content_encoding)r)' % vars(self))


class SegmentReader(object):
    """
    File-like reader that returns at most ``length`` bytes of ``fd``.

    Reading stops at the segment boundary even if the underlying file has
    more data. If the underlying file ends before ``length`` bytes have been
    returned, InvalidArgument is raised rather than letting a short body go
    out with a longer Content-Length.
    """

    def __init__(self, fd, length, close_fd=True, on_read=None, offset=None,
                 lock=None):
        """
        :param fd: Underlying file object, already positioned unless
                   ``offset`` is given
        :param length: Number of bytes this reader returns
        :param close_fd: Whether close() also closes ``fd``
        :param on_read: Optional callable told how many bytes were read
        :param offset: Absolute position of the segment in ``fd``. When set,
                       every read seeks there first while holding ``lock``,
                       so several readers can share one file object.
        :param lock: Lock guarding ``fd`` shared by readers with an offset
        """
        self.fd = fd
        self.length = length
        self.close_fd = close_fd
        self.on_read = on_read
        self.offset = offset
        self.lock = lock
        self.bytes_read = 0

    def read(self, size=-1):
        left = self.length - self.bytes_read
        if size is None or size < 0 or size > left:
            size = left
        if size == 0:
            return b''
        if self.offset is None:
            result = self.fd.read(size)
        else:
            with self.lock:
                self.fd.seek(self.offset + self.bytes_read)
                result = self.fd.read(size)
        if not result:
            reason = (_("payload ended after %(read)d of %(total)d bytes") %
                      {'read': self.bytes_read, 'total': self.length})
            raise exception.InvalidArgument(reason=reason)
        self.bytes_read += len(result)
        if self.on_read is not None:
            self.on_read(len(result))
        return result

    def __iter__(self):
        while True:
            chunk = self.read(CHUNKSIZE)
            if not chunk:
                break
            yield chunk

    def __len__(self):
        return self.length

    def close(self):
        if self.close_fd:
            self.fd.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class Payload(object):
    """
    A finite byte sequence with content metadata.

    Subclasses implement ``open_range``; everything else builds on it.
    """

    is_repeatable = True

    def __init__(self, metadata=None):
        self.metadata = metadata or ContentMetadata()

    @property
    def content_length(self):
        return self.metadata.content_length

    def open(self):
        """Return a reader over the whole payload."""
        if self.content_length is None:
            reason = _("cannot open a payload of unknown length")
            raise exception.InvalidArgument(reason=reason)
        return self.open_range(0, self.content_length)

    def open_range(self, offset, length):
        """Return a :class:`SegmentReader` over ``length`` bytes at
        ``offset``. The caller closes it.
        """
        raise NotImplementedError


class BytesPayload(Payload):
    """Payload backed by an in-memory bytes object."""

    def __init__(self, data, metadata=None):
        if isinstance(data, str):
            data = data.encode('utf-8')
        super(BytesPayload, self).__init__(metadata)
        self.data = data
        if self.metadata.content_length is None:
            self.metadata.content_length = len(data)

    def open_range(self, offset, length):
        fd = io.BytesIO(self.data)
        fd.seek(offset)
        return SegmentReader(fd, length)


class FilePayload(Payload):
    """Payload backed by a file on disk. Each reader opens its own handle."""

    def __init__(self, path, metadata=None):
        super(FilePayload, self).__init__(metadata)
        self.path = path
        if self.metadata.content_length is None:
            self.metadata.content_length = os.path.getsize(path)

    def open_range(self, offset, length):
        fd = open(self.path, 'rb')
        fd.seek(offset)
        return SegmentReader(fd, length)


class StreamPayload(Payload):
    """
    Payload backed by a caller-owned file-like object.

    The stream is never closed here. Seekable streams can be read in any
    order, also from several threads at once: each reader seeks to its own
    position under a lock before every read. Other streams only move
    forward, so ranges must be requested in increasing offset order.
    """

    def __init__(self, fd, metadata=None):
        super(StreamPayload, self).__init__(metadata)
        self.fd = fd
        self._seekable = _is_seekable(fd)
        self._start = fd.tell() if self._seekable else 0
        self._position = 0
        self._lock = threading.Lock()

    @property
    def is_repeatable(self):
        return self._seekable

    def _advance(self, count):
        self._position += count

    def open_range(self, offset, length):
        if self._seekable:
            return SegmentReader(self.fd, length, close_fd=False,
                                 offset=self._start + offset,
                                 lock=self._lock)
        if offset < self._position:
            reason = (_("cannot rewind a non-seekable stream from "
                        "%(position)d to %(offset)d") %
                      {'position': self._position, 'offset': offset})
            raise exception.InvalidArgument(reason=reason)
        self._skip(offset - self._position)
        return SegmentReader(self.fd, length, close_fd=False,
                             on_read=self._advance)

    def _skip(self, count):
        while count > 0:
            data = self.fd.read(min(count, CHUNKSIZE))
            if not data:
                reason = _("stream ended while skipping to the next part")
                raise exception.InvalidArgument(reason=reason)
            count -= len(data)
            self._position += len(data)


class SlicedPayload(Payload):
    """A bounded view of ``length`` bytes of a parent payload."""

    def __init__(self, parent, offset, length, metadata=None):
        if metadata is None:
            metadata = parent.metadata.copy(content_length=length)
        super(SlicedPayload, self).__init__(metadata)
        self.parent = parent
        self.offset = offset
        self.length = length

    @property
    def is_repeatable(self):
        return self.parent.is_repeatable

    def open_range(self, offset, length):
        return self.parent.open_range(self.offset + offset, length)


class PayloadSlicer(object):
    """Cuts payloads into bounded sub-payloads without copying them."""

    def slice(self, payload, offset, length):
        """
        Return a read-only view of exactly ``length`` bytes of ``payload``
        starting at ``offset``.

        :raises: InvalidArgument if the range is negative or runs past the
                 end of a payload of known length
        """
        if offset < 0:
            raise exception.InvalidArgument(reason=_("offset is negative"))
        if length < 0:
            raise exception.InvalidArgument(reason=_("length is negative"))
        total = payload.content_length
        if total is not None and offset + length > total:
            reason = (_("slice %(offset)d+%(length)d exceeds payload length "
                        "%(total)d") %
                      {'offset': offset, 'length': length, 'total': total})
            raise exception.InvalidArgument(reason=reason)
        return SlicedPayload(payload, offset, length)


def _is_seekable(fd):
    try:
        if hasattr(fd, 'seekable'):
            return fd.seekable()
        fd.tell()
    except (AttributeError, OSError):
        return False
    return hasattr(fd, 'seek')
