import pytest

from pumpctl.plot import PlotModel


def test_default_ranges_are_padded_symmetrically():
    plot = PlotModel()
    low, high = plot.x_range()
    assert low < 0.0 and high > 10.0
    assert low == pytest.approx(-(high - 10.0))
    ylow, yhigh = plot.y_range()
    assert ylow < 0 < 100 < yhigh


def test_marker_hidden_by_default():
    plot = PlotModel()
    assert plot.marker() is None


def test_marker_spans_y_range():
    plot = PlotModel()
    plot.set_x(2.5)
    (x0, y0), (x1, y1) = plot.marker()
    assert x0 == x1 == 2.5
    assert (y0, y1) == plot.y_range()


def test_negative_x_hides_marker_again():
    plot = PlotModel()
    plot.set_x(1.0)
    plot.set_x(-1)
    assert plot.marker() is None


def test_set_y_axis_orders_bounds():
    plot = PlotModel()
    plot.set_y_axis(125, 0)
    assert (plot.y_bot, plot.y_top) == (0, 125)
    low, high = plot.y_range()
    assert low == pytest.approx(-(high - 125))


def test_x_range_follows_data():
    plot = PlotModel()
    plot.set_data([1.0, 3.0, 2.0], [0.0, 1.0, 2.0])
    low, high = plot.x_range()
    assert low < 1.0 and high > 3.0
    assert (1.0 - low) == pytest.approx(high - 3.0)


def test_append_data_extends_both_series():
    plot = PlotModel()
    plot.set_data([0.0], [5.0])
    plot.append_data(1.0, 6.0)
    assert plot.x_data == [0.0, 1.0]
    assert plot.y_data == [5.0, 6.0]


def test_clear_axes_blanks_labels_until_change():
    plot = PlotModel()
    plot.set_data([0.0, 1.0], [0.0, 1.0])
    plot.clear_axes()
    assert plot.x_label == "" and plot.y_label == ""
    assert plot.show_curve is False
    plot.append_data(2.0, 2.0)
    assert plot.show_curve is True


def test_y_label():
    plot = PlotModel()
    plot.set_y_label("Units")
    assert plot.y_label == "Units"


def test_start_and_stop():
    plot = PlotModel()
    plot.set_start(42.0)
    assert plot.run_start == 42.0
    plot.set_stop()
    assert plot.run_start == 0.0


def test_render_writes_png(tmp_path):
    plot = PlotModel()
    plot.set_data([0.0, 1.0, 2.0], [0.0, 50.0, 100.0])
    plot.set_x(1.0)
    out = plot.render(tmp_path / "chart.png")
    assert out.read_bytes()[:4] == b"\x89PNG"