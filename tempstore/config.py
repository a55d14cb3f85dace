
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


from dataclasses import dataclass, field
from pathlib import Path
import typing

from . import retention
from .hook import hook_args

# Used when the uploader gives no extension and AUTO_FILE_EXT is on.
# Anything not listed here falls through to mimetypes.guess_extension.
DEFAULT_EXT_OVERRIDE = {
    "audio/flac" : "flac",
    "image/gif" : "gif",
    "image/jpeg" : "jpg",
    "image/png" : "png",
    "image/svg+xml" : "svg",
    "video/webm" : "webm",
    "video/x-matroska" : "mkv",
    "text/plain" : "txt",
    "text/x-diff" : "diff",
}

@dataclass(frozen=True)
class StoreConfig:
    store_path: Path
    max_filesize: float = 256           # MiB
    min_fileage: float = 7              # days
    max_fileage: float = 30             # days
    decay_exp: float = 6
    id_length: int = 3
    id_tries_per_length: int = 3
    id_max_length: int = 64
    max_ext_len: int = 7
    auto_file_ext: bool = False
    ext_override: typing.Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_EXT_OVERRIDE))
    download_path: str = "{}"
    external_hook: typing.Optional[typing.Union[str, typing.Sequence[str]]] = None
    hook_timeout: float = 60
    log_path: typing.Optional[Path] = None

    def __post_init__(self):
        if self.download_path.count("{}") != 1:
            raise ValueError(f"DOWNLOAD_PATH needs exactly one '{{}}' placeholder: {self.download_path!r}")
        if self.min_fileage > self.max_fileage:
            raise ValueError("MIN_FILEAGE is larger than MAX_FILEAGE")
        if self.max_filesize <= 0:
            raise ValueError("MAX_FILESIZE must be positive")
        if self.id_length < 1 or self.id_tries_per_length < 1:
            raise ValueError("ID_LENGTH and ID_TRIES_PER_LENGTH must be at least 1")
        if self.external_hook not in (None, "") and not hook_args(self.external_hook):
            raise ValueError(f"EXTERNAL_HOOK is empty: {self.external_hook!r}")

    @property
    def max_bytes(self) -> int:
        return int(self.max_filesize * 1024 * 1024)

    def max_age_days(self, size_mib: float) -> float:
        return retention.max_age_days(size_mib, self.min_fileage, self.max_fileage,
                                      self.max_filesize, self.decay_exp)

    @classmethod
    def from_mapping(cls, config: typing.Mapping) -> "StoreConfig":
        """
        Build a StoreConfig from a Flask-style config mapping

        Only STORE_PATH is required, everything else falls back to the
        defaults above.
        """
        keys = {
            "max_filesize" : "MAX_FILESIZE",
            "min_fileage" : "MIN_FILEAGE",
            "max_fileage" : "MAX_FILEAGE",
            "decay_exp" : "DECAY_EXP",
            "id_length" : "ID_LENGTH",
            "id_tries_per_length" : "ID_TRIES_PER_LENGTH",
            "id_max_length" : "ID_MAX_LENGTH",
            "max_ext_len" : "MAX_EXT_LEN",
            "auto_file_ext" : "AUTO_FILE_EXT",
            "ext_override" : "EXT_OVERRIDE",
            "download_path" : "DOWNLOAD_PATH",
            "external_hook" : "EXTERNAL_HOOK",
            "hook_timeout" : "HOOK_TIMEOUT",
        }
        kwargs = {k : config[v] for k, v in keys.items() if config.get(v) is not None}

        if config.get("LOG_PATH"):
            kwargs["log_path"] = Path(config["LOG_PATH"])

        return cls(store_path=Path(config["STORE_PATH"]), **kwargs)
