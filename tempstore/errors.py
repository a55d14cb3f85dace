
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


class StoreError(Exception):
    code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

class SizeExceeded(StoreError):
    code = 413

class EmptyUpload(StoreError):
    code = 400

class WriteFailure(StoreError):
    code = 500

class HookRejected(StoreError):
    code = 400

    def __init__(self, message, output=""):
        super().__init__(message)
        self.output = output

class NameSpaceExhaustion(StoreError):
    code = 500
