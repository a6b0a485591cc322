import pytest

from arbengine.var import VaREstimator


def _with_losses(count):
    estimator = VaREstimator()
    for value in range(1, count + 1):
        estimator.add_pnl(-float(value))
    return estimator


def test_empty_history_gives_zero():
    assert VaREstimator().historical_var() == 0.0


def test_only_gains_gives_zero():
    estimator = VaREstimator()
    for value in (1.0, 2.0, 3.0):
        estimator.add_pnl(value)
    assert estimator.historical_var(0.99) == 0.0


def test_var_95_rank():
    assert _with_losses(100).historical_var(0.95) == 6.0


def test_var_99_rank():
    assert _with_losses(100).historical_var(0.99) == 2.0


def test_result_is_one_of_the_losses():
    estimator = VaREstimator()
    pnls = [-3.5, 2.0, -1.25, -7.0, 4.0, -0.5]
    for pnl in pnls:
        estimator.add_pnl(pnl)
    assert -estimator.historical_var(0.9) in pnls


def test_full_confidence_gives_smallest_loss():
    estimator = VaREstimator()
    for pnl in (-9.0, -4.0, -6.0):
        estimator.add_pnl(pnl)
    assert estimator.historical_var(1.0) == 4.0


def test_history_is_bounded():
    estimator = VaREstimator()
    for _ in range(1000):
        estimator.add_pnl(-1.0)
    for _ in range(1000):
        estimator.add_pnl(1.0)
    assert estimator.historical_var() == 0.0


@pytest.mark.parametrize("level", [0.0, -0.5, 1.5])
def test_invalid_confidence(level):
    with pytest.raises(ValueError):
        VaREstimator().historical_var(level)


def test_report_format_when_empty():
    report = VaREstimator().format_report()
    assert "VaR (95%): $0.00" in report
    assert "VaR (99%): $0.00" in report


def test_print_report_matches_format(capsys):
    estimator = _with_losses(10)
    estimator.print_report()
    assert capsys.readouterr().out == estimator.format_report()