"""Shared pytest fixtures for pwrtest tests."""

import pytest

from pwrtest.mocks import MockClock, MockControlTool, MockFileSystem, MockTestTool
from pwrtest.power import PowerController
from pwrtest.telemetry import TelemetryClient


@pytest.fixture
def clock():
    return MockClock()


@pytest.fixture
def control():
    return MockControlTool()


@pytest.fixture
def fs():
    return MockFileSystem()


@pytest.fixture
def tool(clock):
    return MockTestTool(clock=clock)


@pytest.fixture
def telemetry(control, clock):
    return TelemetryClient(control, clock)


@pytest.fixture
def power(control, telemetry, clock):
    return PowerController(control, telemetry, clock)
