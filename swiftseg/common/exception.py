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

"""Swiftseg exception subclasses"""

from swiftseg.i18n import _

_FATAL_EXCEPTION_FORMAT_ERRORS = False


class SwiftsegException(Exception):
    """
    Base Swiftseg Exception

    To correctly use this class, inherit from it and define
    a 'message' property. That message will get printf'd
    with the keyword arguments provided to the constructor.
    """
    message = _("An unknown exception occurred")

    def __init__(self, message=None, *args, **kwargs):
        if not message:
            message = self.message
        try:
            if kwargs:
                message = message % kwargs
        except Exception:
            if _FATAL_EXCEPTION_FORMAT_ERRORS:
                raise
            else:
                # at least get the core message out if something happened
                pass
        self.msg = message
        super(SwiftsegException, self).__init__(message)

    def __str__(self):
        return str(self.msg)


class InvalidArgument(SwiftsegException):
    message = _("Invalid argument: %(reason)s")


class BadStoreConfiguration(SwiftsegException):
    message = _("Store %(store_name)s could not be configured correctly. "
                "Reason: %(reason)s")


class TransportError(SwiftsegException):
    message = _("Error communicating with the object store: %(reason)s")


class ProviderError(SwiftsegException):
    message = _("The object store rejected the request with status "
                "%(http_status)s: %(reason)s")

    def __init__(self, message=None, http_status=None, **kwargs):
        self.http_status = http_status
        super(ProviderError, self).__init__(message,
                                            http_status=http_status,
                                            **kwargs)


class NotFound(ProviderError):
    message = _("An object with the specified identifier was not found: "
                "%(reason)s")


class Conflict(ProviderError):
    message = _("An object with the same identifier is currently being "
                "operated on: %(reason)s")
