
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


from functools import lru_cache
from mimetypes import guess_extension
from pathlib import PurePosixPath
import logging
import re
import typing

log = logging.getLogger(__name__)

# A suffix directly preceded by one of these is kept as a pair, e.g. tar.gz
ARCHIVE_MARKERS = {"tar"}

# Characters allowed in a stored extension; everything else is dropped
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._+-]")

@lru_cache(maxsize=None)
def _mimedetect():
    # libmagic is only needed when content sniffing is enabled
    from magic import Magic
    return Magic(mime=True, mime_encoding=False)

def detect_mime(source) -> str:
    """ Guess the MIME type of a path or of a seekable binary stream """
    if hasattr(source, "read"):
        pos = source.tell()
        head = source.read(2048)
        source.seek(pos)
        return _mimedetect().from_buffer(head)

    return _mimedetect().from_file(str(source))

def clean(ext: str) -> str:
    ext = UNSAFE_CHARS.sub("", ext)
    return re.sub(r"\.{2,}", ".", ext).strip(".")

def ext_by_name(name: str) -> str:
    # Unlike PurePath.suffix, a leading dot counts: ".txt" is "txt"
    base = PurePosixPath(name.replace("\\", "/")).name
    head, sep, ext = base.rpartition(".")

    if not sep:
        return ""

    _, sep2, ext2 = head.rpartition(".")
    if sep2 and ext2.lower() in ARCHIVE_MARKERS and ext:
        return f"{ext2}.{ext}"

    return ext

def ext_by_content(source, override: typing.Optional[typing.Mapping[str, str]] = None,
                   detect: typing.Callable = detect_mime) -> str:
    mime = detect(source).split(";")[0].strip()
    guess = (override or {}).get(mime) or guess_extension(mime) or ""
    guess = guess.lstrip(".")

    if not guess and mime.startswith("text/"):
        guess = "txt"

    log.debug(f"extension - detected MIME: '{mime}' - guessed: '{guess}'")
    return guess

def resolve(name: str, source, auto: bool, max_length: int,
            override: typing.Optional[typing.Mapping[str, str]] = None,
            detect: typing.Optional[typing.Callable] = None) -> str:
    """
    Pick the extension a stored file gets

    The uploader's name wins.  Only when it has no extension and auto is
    set do we look at the content.  Anything outside letters, digits and
    ._+- is dropped, and the result is cut to max_length.
    """
    ext = clean(ext_by_name(name))

    if not ext and auto:
        ext = clean(ext_by_content(source, override, detect or detect_mime))

    log.debug(f"extension - specified: {name!r} - resolved: '{ext}'")
    return ext[:max_length].rstrip(".")
