"""Config for pytests."""

from tests.fixtures.matrices import *
