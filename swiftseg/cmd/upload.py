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
Swiftseg Upload

Writes a local file to Swift, as a segmented object when it is large or
when --multipart is given, and prints the resulting ETag.
"""

import os
import sys

from oslo_config import cfg
from oslo_log import log as logging

from swiftseg.common import config
from swiftseg.common import exception
from swiftseg import domain
from swiftseg.i18n import _
from swiftseg import payload
from swiftseg import swift

cli_opts = [
    cfg.StrOpt('container', short='c',
               help=_("Destination container. Defaults to the "
                      "[swift]/container option.")),
    cfg.StrOpt('object-name', short='o',
               help=_("Name of the object to create. Defaults to the base "
                      "name of the file.")),
    cfg.StrOpt('content-type',
               help=_("Content type stored with the object.")),
    cfg.BoolOpt('multipart', default=False,
                help=_("Write the file as a segmented object even if it "
                       "fits in a single segment.")),
    cfg.StrOpt('file', positional=True, required=False,
               help=_("Path of the file to upload.")),
]

CONF = config.CONF
CONF.register_cli_opts(cli_opts)
logging.register_options(CONF)
CONF.set_default(name='use_stderr', default=True)


def main(argv=None):
    try:
        config.parse_args(args=argv)
        logging.setup(CONF, 'swiftseg')

        if not CONF.file:
            raise RuntimeError(_("a file to upload is required"))
        object_name = CONF.object_name or os.path.basename(CONF.file)
        metadata = payload.ContentMetadata(content_type=CONF.content_type)
        data = payload.FilePayload(CONF.file, metadata=metadata)

        store = swift.Store()
        etag = store.put(CONF.container, object_name, data,
                         domain.PutOptions(multipart=CONF.multipart))
        print(etag)
    except (exception.SwiftsegException, OSError, RuntimeError) as e:
        sys.exit("ERROR: %s" % e)


if __name__ == '__main__':
    main()
