
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


import logging
import time
import typing

log = logging.getLogger(__name__)

class PurgedFile(typing.NamedTuple):
    filename: str
    size_mib: float
    age_days: float

class PurgeResult(typing.NamedTuple):
    count: int
    total_mib: float

def sweep(store, now: typing.Optional[float] = None,
          report: typing.Optional[typing.Callable[[PurgedFile], None]] = None) -> PurgeResult:
    """
    Delete every file older than its size allows

    Files younger than the configured minimum age are always kept.  Older
    ones are deleted once their age passes the retention curve's value for
    their size.  Files that are already gone by the time we get to them are
    skipped, and files that can't be deleted are logged and left behind.
    report, if given, is called with each deleted file.
    """
    config = store.config
    now = time.time() if now is None else now
    count = 0
    total = 0.0

    for f in store.entries():
        age = f.age_days(now)

        # keep all files below the min age
        if age < config.min_fileage:
            continue

        size = f.size_mib
        max_age = config.max_age_days(size)

        if age <= max_age:
            continue

        try:
            removed = store.delete(f.filename)
        except OSError as e:
            # one stuck file doesn't stop the sweep
            log.error(f"could not delete {f.filename}: {e}")
            continue

        if not removed:
            log.debug(f"{f.filename} already gone")
            continue

        log.info(f"deleted {f.filename}, {size:.2f} MiB, {age:.1f} days old (max {max_age:.1f})")
        count += 1
        total += size

        if report:
            report(PurgedFile(f.filename, size, age))

    return PurgeResult(count, total)
