"""Tests for pwrtest/session.py — session sequencing, persistence, reporting."""

from __future__ import annotations

import pytest

from pwrtest.charge import ChargeManager
from pwrtest.implementations import ToolLaunchError
from pwrtest.interfaces import SessionConfig
from pwrtest.mocks import MockTestTool
from pwrtest.power import PWR_BUTTON_PRESS
from pwrtest.runner import TestRunner
from pwrtest.session import ResultWriteError, SessionDriver, format_elapsed, result_filename


def _config(**overrides) -> SessionConfig:
    values = dict(
        tests=("A", "B"),
        charge_from=20,
        charge_to=80,
        board="caroline",
        dut_address="10.0.0.5",
        autotest_dir="/src/autotest",
        out_dir="/out",
    )
    values.update(overrides)
    return SessionConfig(**values)


@pytest.fixture
def make_driver(control, telemetry, power, clock, fs, tool):
    def _make(config=None, test_tool=None):
        config = config or _config()
        runner = TestRunner(
            test_tool or tool,
            board=config.board,
            autotest_dir=config.autotest_dir,
            dut_address=config.dut_address,
        )
        charge = ChargeManager(telemetry, power, clock)
        return SessionDriver(config, charge, runner, fs, clock, telemetry=telemetry)

    return _make


class TestFormatElapsed:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0.00s"),
        (45, "45.00s"),
        (59.994, "59.99s"),
        (60, "1.00m"),
        (125, "2.08m"),
        (3599, "59.98m"),
        (3600, "1.00h"),
        (7200, "2.00h"),
    ])
    def test_format(self, seconds, expected):
        assert format_elapsed(seconds) == expected


def test_result_filename():
    assert result_filename(1, "A", "10.0.0.5") == "test_no_1__A__10.0.0.5"


class TestSessionConfig:
    def test_rejects_from_above_to(self):
        with pytest.raises(ValueError):
            _config(charge_from=90, charge_to=80)

    @pytest.mark.parametrize("field", ["charge_from", "charge_to"])
    def test_rejects_out_of_range(self, field):
        with pytest.raises(ValueError):
            _config(**{field: 101})
        with pytest.raises(ValueError):
            _config(**{field: -1})

    def test_rejects_empty_tests(self):
        with pytest.raises(ValueError):
            _config(tests=())
        with pytest.raises(ValueError):
            _config(tests=("A", ""))

    def test_is_frozen(self):
        config = _config()
        with pytest.raises(AttributeError):
            config.board = "eve"


class TestSessionDriver:
    def test_writes_one_file_per_test(self, control, fs, tool, make_driver):
        control.set_battery(90)
        tool.set_output("A", "output of A\n")
        tool.set_output("B", "output of B\n")

        results = make_driver().run()

        assert fs.get_all_files() == {
            "/out/test_no_1__A__10.0.0.5": "output of A\n",
            "/out/test_no_2__B__10.0.0.5": "output of B\n",
        }
        assert [(r.name, r.index) for r in results] == [("A", 1), ("B", 2)]
        assert results[0].path == "/out/test_no_1__A__10.0.0.5"

    def test_tests_run_in_order_each_after_its_charge_check(self, control, clock, fs, make_driver):
        control.set_battery(90)
        checks_before_run = []

        class OrderedTool(MockTestTool):
            def run(self, args):
                checks_before_run.append((args[-1], control.get_queries().count("battery_charge_percent")))
                return super().run(args)

        make_driver(test_tool=OrderedTool(clock=clock)).run()
        assert checks_before_run == [("A", 1), ("B", 2)]

    def test_charge_cycle_runs_before_first_test(self, control, make_driver, tool):
        control.set_battery(10, 85, 85)
        control.set_power_state("S0", "G3")
        make_driver().run()
        assert control.get_sent().count(PWR_BUTTON_PRESS) == 2
        assert [run[-1] for run in tool.get_runs()] == ["A", "B"]

    def test_reports_elapsed_times(self, control, tool, make_driver, capsys):
        control.set_battery(90)
        tool.set_output("A", "a", duration=45)
        tool.set_output("B", "b", duration=125)

        driver = make_driver()
        results = driver.run()

        out = capsys.readouterr().out
        assert "running test A..." in out
        assert "test A took 45.00s" in out
        assert "test B took 2.08m" in out
        assert "all 2 tests done in 2.83m" in out
        assert [r.elapsed for r in results] == [45, 125]
        assert driver.total_elapsed == 170

    def test_report_battery(self, control, make_driver, capsys):
        control.set_battery(90)
        make_driver(_config(tests=("A",), report_battery=True)).run()
        assert "battery: 90%" in capsys.readouterr().out

    def test_report_battery_requires_telemetry(self, clock, fs, tool):
        runner = TestRunner(tool, "caroline", "/src/autotest", "10.0.0.5")
        with pytest.raises(ValueError):
            SessionDriver(_config(report_battery=True), charge=None, runner=runner, fs=fs, clock=clock)

    def test_write_failure_aborts_session(self, control, fs, tool, make_driver):
        control.set_battery(90)
        fs.set_fail_on_write(True)
        with pytest.raises(ResultWriteError, match="test_no_1__A__10.0.0.5"):
            make_driver().run()
        assert [run[-1] for run in tool.get_runs()] == ["A"]

    def test_launch_failure_keeps_earlier_results(self, control, fs, clock, make_driver):
        control.set_battery(90)

        class FailsOnB(MockTestTool):
            def run(self, args):
                if args[-1] == "B":
                    raise ToolLaunchError("failed to run test_that")
                return super().run(args)

        tool = FailsOnB(clock=clock)
        tool.set_output("A", "a")
        with pytest.raises(ToolLaunchError):
            make_driver(test_tool=tool).run()
        assert list(fs.get_all_files()) == ["/out/test_no_1__A__10.0.0.5"]
