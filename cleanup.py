#!/usr/bin/env python3


"""
    Copyright © 2020 Mia Herkt
    Licensed under the EUPL, Version 1.2 or - as soon as approved
    by the European Commission - subsequent versions of the EUPL
    (the "License");
    You may not use this work except in compliance with the License.
    You may obtain a copy of the license at:

        https://joinup.ec.europa.eu/software/page/eupl

    Unless required by applicable law or agreed to in writing,
    software distributed under the License is distributed on an
    "AS IS" basis, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND,
    either express or implied.
    See the License for the specific language governing permissions
    and limitations under the License.
"""


# Standalone purge for cron, e.g.
#   0 * * * * cd /srv/tempshare && ./cleanup.py >> /var/log/tempshare-purge.log

from tempshare import app, purge_store

def main():
    with app.app_context():
        purge_store()

if __name__ == "__main__":
    main()
