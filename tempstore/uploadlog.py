
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


from pathlib import Path
import datetime
import shlex

class UploadLog:
    """
    Appends one tab-separated line per upload:

        timestamp  address  size  'original name'  stored name
    """
    def __init__(self, path):
        self.path = Path(path)

    @staticmethod
    def format(addr, size, name, stored, when=None) -> str:
        when = when or datetime.datetime.now(datetime.timezone.utc).astimezone()
        return "\t".join([
            when.isoformat(timespec="seconds"),
            addr or "",
            str(size),
            shlex.quote(name),
            stored,
        ]) + "\n"

    def record(self, addr, size, name, stored, when=None):
        with open(self.path, "a", encoding="utf-8") as lf:
            lf.write(self.format(addr, size, name, stored, when))
