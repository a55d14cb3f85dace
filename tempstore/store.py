
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
import logging
import os
import shutil
import typing

from . import names
from .config import StoreConfig
from .errors import EmptyUpload, HookRejected, NameSpaceExhaustion, SizeExceeded, WriteFailure
from .hook import CommandRunner, hook_args
from .uploadlog import UploadLog

log = logging.getLogger(__name__)

# How often a lost exclusive-create race is retried before giving up
CREATE_ATTEMPTS = 100

class UploadRequest(typing.NamedTuple):
    name: str
    size: int
    source: typing.BinaryIO
    addr: str

class StoredFile(typing.NamedTuple):
    filename: str
    path: Path
    size_bytes: int
    stored_at: float

    @property
    def id(self) -> str:
        return self.filename.split(".", 1)[0]

    @property
    def extension(self) -> str:
        return self.filename.partition(".")[2]

    @property
    def size_mib(self) -> float:
        return self.size_bytes / (1024 * 1024)

    def age_days(self, now: float) -> float:
        return (now - self.stored_at) / (60 * 60 * 24)

class StoredUpload(typing.NamedTuple):
    filename: str
    url: str
    path: Path
    size_bytes: int
    max_age_days: float
    expires_at: datetime.datetime

    @property
    def size_mib(self) -> float:
        return self.size_bytes / (1024 * 1024)

class Store:
    def __init__(self, config: StoreConfig, runner=None,
                 rand: typing.Callable[[int], str] = names.random_id,
                 upload_log: typing.Optional[UploadLog] = None):
        self.config = config
        self.root = Path(config.store_path)
        self.runner = runner or CommandRunner(config.hook_timeout)
        self.rand = rand

        if upload_log is None and config.log_path:
            upload_log = UploadLog(config.log_path)
        self.upload_log = upload_log

    def exists(self, filename: str) -> bool:
        return (self.root / filename).exists()

    def _create(self, ext):
        for _ in range(CREATE_ATTEMPTS):
            name = names.generate(self.exists, self.config.id_length, ext,
                                  self.config.id_tries_per_length, self.rand,
                                  self.config.id_max_length)
            try:
                return name, open(self.root / name, "xb")
            except FileExistsError:
                # Someone else created it between our check and open
                log.debug(f"lost race for {name}, retrying")

        raise NameSpaceExhaustion(f"Could not create a new file after {CREATE_ATTEMPTS} attempts")

    def _run_hook(self, upload: UploadRequest, path: Path):
        env = {
            "REMOTE_ADDR" : upload.addr or "",
            "ORIGINAL_NAME" : upload.name.replace("\0", ""),
            "STORED_FILE" : str(path),
        }
        try:
            code, output = self.runner.run(hook_args(self.config.external_hook), env)
        except Exception:
            path.unlink(missing_ok=True)
            raise

        if code != 0:
            path.unlink(missing_ok=True)
            log.warning(f"hook rejected {path.name} from {upload.addr} (exit status {code}): {output}")
            raise HookRejected(output or f"Upload rejected (exit status {code})", output)

    def put(self, upload: UploadRequest, ext: str, site_base: str = "") -> StoredUpload:
        """
        Store an upload under a new random name

        Nothing is left in the store if this raises: size checks happen
        before anything is written, and failed writes or hook rejections
        remove the file again.
        """
        if upload.size == 0:
            raise EmptyUpload("Uploaded file is empty")
        if upload.size > self.config.max_bytes:
            raise SizeExceeded(f"Max file size ({self.config.max_filesize:g} MiB) exceeded")

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            name, of = self._create(ext)
        except (OSError, ValueError) as e:
            log.error(f"could not create file in {self.root}: {e}")
            raise WriteFailure("Could not store file") from e

        path = self.root / name

        try:
            with of:
                shutil.copyfileobj(upload.source, of)
                size = of.tell()
        except OSError as e:
            path.unlink(missing_ok=True)
            log.error(f"could not write {path}: {e}")
            raise WriteFailure("Could not store file") from e

        # The declared size is what was checked above, the stream may disagree
        if size == 0 or size > self.config.max_bytes:
            path.unlink(missing_ok=True)
            if size == 0:
                raise EmptyUpload("Uploaded file is empty")
            raise SizeExceeded(f"Max file size ({self.config.max_filesize:g} MiB) exceeded")

        if self.config.external_hook:
            self._run_hook(upload, path)

        max_age = self.config.max_age_days(size / (1024 * 1024))
        expires = datetime.datetime.now() + datetime.timedelta(days=max_age)
        url = site_base + self.config.download_path.format(name)

        log.info(f"stored {name} ({size} bytes) from {upload.addr}")

        if self.upload_log:
            try:
                self.upload_log.record(upload.addr, size, upload.name, name)
            except OSError as e:
                log.error(f"could not write upload log {self.upload_log.path}: {e}")

        return StoredUpload(name, url, path, size, max_age, expires)

    def entries(self) -> typing.Iterator[StoredFile]:
        """
        Yield every file currently in the store

        Files may come and go while this runs; those that vanish before they
        can be looked at are skipped.  A store directory that doesn't exist
        yet is empty.
        """
        try:
            it = os.scandir(self.root)
        except FileNotFoundError:
            return

        with it:
            for de in it:
                try:
                    if not de.is_file(follow_symlinks=False):
                        continue
                    st = de.stat(follow_symlinks=False)
                except FileNotFoundError:
                    continue

                yield StoredFile(de.name, Path(de.path), st.st_size, st.st_mtime)

    def delete(self, filename: str) -> bool:
        try:
            os.remove(self.root / filename)
        except FileNotFoundError:
            return False
        return True
