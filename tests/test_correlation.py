import pytest

from arbengine.correlation import CorrelationAnalyzer, pearson_correlation


def test_perfect_positive():
    assert pearson_correlation([1.0, 2.0, 3.0, 4.0], [2.0, 4.0, 6.0, 8.0]) == pytest.approx(1.0)


def test_perfect_negative():
    assert pearson_correlation([1.0, 2.0, 3.0, 4.0], [8.0, 6.0, 4.0, 2.0]) == pytest.approx(-1.0)


def test_unequal_lengths_give_zero():
    assert pearson_correlation([1.0, 2.0, 3.0], [1.0, 2.0]) == 0.0


def test_single_point_gives_zero():
    assert pearson_correlation([1.0], [1.0]) == 0.0


def test_constant_series_gives_zero():
    assert pearson_correlation([5.0, 5.0, 5.0], [1.0, 2.0, 3.0]) == 0.0


def test_symmetric():
    xs = [1.0, 3.0, 2.0, 5.0, 4.0]
    ys = [2.0, 1.0, 4.0, 3.0, 6.0]
    assert pearson_correlation(xs, ys) == pytest.approx(pearson_correlation(ys, xs))


def test_bounded():
    xs = [1.0, 3.0, 2.0, 5.0, 4.0]
    ys = [2.0, 1.0, 4.0, 3.0, 6.0]
    assert -1.0 <= pearson_correlation(xs, ys) <= 1.0


def test_analyzer_correlation_of_tracking_prices():
    analyzer = CorrelationAnalyzer()
    for step in range(10):
        analyzer.update_price("A", 100.0 + step)
        analyzer.update_price("B", 200.0 + 2 * step)
    assert analyzer.correlation("A", "B") == pytest.approx(1.0)


def test_analyzer_window_aligns_lengths():
    analyzer = CorrelationAnalyzer()
    for step in range(150):
        analyzer.update_price("A", float(step))
    for step in range(100):
        analyzer.update_price("B", float(step))
    assert analyzer.correlation("A", "B") == pytest.approx(1.0)


def test_analyzer_unknown_symbol_gives_zero():
    analyzer = CorrelationAnalyzer()
    analyzer.update_price("A", 1.0)
    assert analyzer.correlation("A", "Z") == 0.0


def test_alert_printed_when_diverging(capsys):
    analyzer = CorrelationAnalyzer()
    assert analyzer.alert_if_diverging("X", "Y") is True
    out = capsys.readouterr().out
    assert "Correlation Alert: X & Y" in out


def test_no_alert_when_correlated(capsys):
    analyzer = CorrelationAnalyzer()
    for step in range(10):
        analyzer.update_price("X", float(step))
        analyzer.update_price("Y", float(step) * 3)
    assert analyzer.alert_if_diverging("X", "Y") is False
    assert capsys.readouterr().out == ""