import os
import sys
from datetime import datetime, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from hybrid_codec.keys import generate_keypair

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# RSA keygen is the slow part of the suite; share keys across modules.
@pytest.fixture(scope="session")
def keypair():
    return generate_keypair(2048)


@pytest.fixture(scope="session")
def other_keypair():
    return generate_keypair(2048)


@pytest.fixture(scope="session")
def small_keypair():
    return generate_keypair(1024)
