"""Shared pytest setup: every test module sees the patched mockfirestore."""

from tests.mock_utils import patch_mockfirestore

patch_mockfirestore()
