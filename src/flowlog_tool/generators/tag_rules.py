"""Random tag rule generation with unique port/protocol pairs."""

from __future__ import annotations

import os
import random
from typing import Iterator, List, Optional

from ..core.constants import PROTOCOL_NAMES, TAG_RULE_HEADER
from ..core.models import PortProtocolKey
from ..exceptions import GenerationError
from ..logging import get_logger
from ..reporting.sink import write_csv

logger = get_logger(__name__)

CATEGORIES = ("SecurityGroup", "Environment", "Application", "Service")
ENVIRONMENTS = ("Prod", "Dev", "Test", "Staging")
APPLICATIONS = ("App1", "App2", "App3", "App4")
SERVICES = ("Web", "Database", "Cache", "Messaging")

MAX_UNIQUE_RULES = 65535 * len(PROTOCOL_NAMES)


def random_rule_port(rng: random.Random) -> int:
    """Return a port: 70% well-known, 20% registered, 10% dynamic."""
    probability = rng.randrange(100)
    if probability < 70:
        return rng.randrange(1, 1025)
    if probability < 90:
        return rng.randrange(1025, 49152)
    return rng.randrange(49152, 65536)


def random_tag(rng: random.Random) -> str:
    category = rng.choice(CATEGORIES)
    if category == "SecurityGroup":
        return f"SG-{rng.randrange(1000)}"
    if category == "Environment":
        return rng.choice(ENVIRONMENTS)
    if category == "Application":
        return rng.choice(APPLICATIONS)
    return rng.choice(SERVICES)


class TagRuleGenerator:
    """Produce ``dstport,protocol,tag`` rules for distinct port/protocol pairs."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def iter_rules(self, number_of_records: int) -> Iterator[str]:
        """Yield ``number_of_records`` rule lines without newlines."""
        if number_of_records < 0:
            raise GenerationError("number_of_records must not be negative")
        if number_of_records > MAX_UNIQUE_RULES:
            raise GenerationError(
                f"Cannot generate {number_of_records} unique rules; at most {MAX_UNIQUE_RULES} exist"
            )
        seen: set[PortProtocolKey] = set()
        for _ in range(number_of_records):
            while True:
                key = PortProtocolKey(str(random_rule_port(self._rng)), self._rng.choice(PROTOCOL_NAMES))
                if key not in seen:
                    break
            seen.add(key)
            yield f"{key},{random_tag(self._rng)}"

    def generate_tag_rules(self, number_of_records: int, csv_file: str | os.PathLike[str]) -> int:
        """Write ``number_of_records`` rules to ``csv_file`` and return the count."""
        rules: List[str] = list(self.iter_rules(number_of_records))
        written = write_csv(csv_file, TAG_RULE_HEADER, rules)
        logger.info("Tag rules generated successfully: %d rules in %s", written, csv_file)
        return written


__all__ = ["TagRuleGenerator", "random_rule_port", "random_tag", "MAX_UNIQUE_RULES"]
