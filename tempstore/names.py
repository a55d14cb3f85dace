
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
import secrets
import string
import typing

from .errors import NameSpaceExhaustion

log = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase

def random_id(length: int) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))

def filename(id_, ext):
    return f"{id_}.{ext}" if ext else id_

def generate(exists: typing.Callable[[str], bool], start_length: int, ext: str,
             tries_per_length: int = 3,
             rand: typing.Callable[[int], str] = random_id,
             max_length: int = 64) -> str:
    """
    Find a file name that isn't taken yet

    Draws random IDs of start_length characters, checking each against
    exists().  After tries_per_length misses, the length grows by one.
    Nothing is reserved here; callers must create the file exclusively and
    call again if they lose the race.
    """
    for length in range(start_length, max_length + 1):
        for _ in range(tries_per_length):
            name = filename(rand(length), ext)

            if not exists(name):
                return name

            log.debug(f"name {name} taken")

        log.debug(f"no free name of length {length} after {tries_per_length} tries")

    raise NameSpaceExhaustion(f"No free file name up to {max_length} characters")
