class Bounds:
    def __init__ (self, left, top, width, height):
        self.left = left
        self.top = top
        self.width = width
        self.height = height

    def __str__(self) -> str:
        return f"Bounds({self.left}, {self.top}, {self.width}, {self.height})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bounds):
            return NotImplemented
        return (self.left, self.top, self.width, self.height) == (other.left, other.top, other.width, other.height)

    @classmethod
    def padded(cls, frame_width, frame_height, padding) -> "Bounds":
        """
        Create the capture frame shrunk by padding on every side.

        Parameters:
        - frame_width (int): Width of the full frame.
        - frame_height (int): Height of the full frame.
        - padding (int): Margin removed from each side.

        Returns:
        - Bounds: The padded frame.
        """
        return cls(padding, padding, frame_width - padding * 2, frame_height - padding * 2)

    def right(self):
        return self.left + self.width

    def bottom(self):
        return self.top + self.height

    def contains(self, point) -> bool:
        """
        Check if a point lies within the Bounds object, edges included.

        Parameters:
        - point: Any (x, y) pair.

        Returns:
        - bool: True if the point is inside or on the edge, False otherwise.
        """
        x, y = point[0], point[1]
        return self.left <= x <= self.right() and self.top <= y <= self.bottom()
