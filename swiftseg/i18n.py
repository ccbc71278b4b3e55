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

"""Message translation for swiftseg.

Exception and help strings go through ``_``. Log messages are not
translated; ``_LI`` and ``_LE`` only mark them.
"""

import oslo_i18n as i18n

DOMAIN = 'swiftseg'

_translators = i18n.TranslatorFactory(domain=DOMAIN)

_ = _translators.primary


def enable_lazy(enable=True):
    """Defer translation of ``_`` strings until they are rendered."""
    return i18n.enable_lazy(enable)


def _LI(msg):
    return msg


def _LE(msg):
    return msg
