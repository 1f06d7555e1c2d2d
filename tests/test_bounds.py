
from common.bounds import Bounds


class TestClass:
    def test_bounds1(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.left == 0 and bounds.top == 0 and bounds.width == 10 and bounds.height == 10

    def test_bounds2(self):
        bounds = Bounds(2, 3, 10, 20)
        assert bounds.right() == 12 and bounds.bottom() == 23

    def test_bounds3(self):
        bounds = Bounds.padded(640, 480, 30)
        assert bounds == Bounds(30, 30, 580, 420)

    def test_bounds4(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.contains((5, 5))

    def test_bounds5(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.contains((0, 0)) and bounds.contains((10, 10))

    def test_bounds6(self):
        bounds = Bounds(0, 0, 10, 10)
        assert not bounds.contains((10.5, 5))

    def test_bounds7(self):
        bounds = Bounds(2, 2, 4, 4)
        assert not bounds.contains((1, 3)) and not bounds.contains((3, 7))

    def test_bounds8(self):
        assert Bounds(0, 0, 10, 10) != Bounds(0, 0, 10, 11)

    def test_bounds9(self):
        assert str(Bounds(30, 30, 580, 420)) == "Bounds(30, 30, 580, 420)"
