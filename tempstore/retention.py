
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


""" For a file of a given size, determine the largest allowed age of that file

    min_age + (max_age - min_age) * (1 - size / max_size) ** decay

The ratio is clamped to [0, 1], so sizes outside the allowed range never raise
and always land between min_age and max_age.  The higher the decay exponent,
the faster the age falls off from max_age as files grow.

Value returned is a duration in days.
"""
def max_age_days(size_mib: float, min_age: float, max_age: float,
                 max_size_mib: float, decay: float) -> float:
    ratio = min(max(size_mib / max_size_mib, 0.0), 1.0)
    return min_age + (max_age - min_age) * (1.0 - ratio) ** decay
