# Representing a 2D grid of pixels as a graph.
#
# A random spanning tree across the pixels linearizes the pixel coordinates
# while keeping some locality. Because the graph is so regular, every node is
# packed into a single byte of a bytearray, which matters once the grid has
# millions of pixels:
#
#   bit 6     the node is in the tree (only used while spanning)
#   bits 4-5  the direction towards the node's parent
#   bits 0-3  one bit per direction; before linking a set bit means that
#             direction steps off the grid, after linking it means that
#             direction leads to a child

from collections import deque

UP = 0
RIGHT = 1
DOWN = 2
LEFT = 3

DIRECTIONS = (UP, RIGHT, DOWN, LEFT)

IN_TREE = 0b0100_0000
PARENT_SHIFT = 4
PARENT_MASK = 0b0011_0000
EDGE_MASK = 0b0000_1111

# Twelve is divisible by two, three and four, so repeating the valid
# directions of a node to fill twelve slots keeps every direction equally
# likely, while a single draw in [0, 12) picks one
NEIGHBOR_SLOTS = 12

# How many [0, 12) draws are taken from the random generator at once
DRAW_BATCH_SIZE = 2**16

# Clears the edge bits of every node in a single bytearray.translate() call
CLEAR_EDGES = bytes(value & ~EDGE_MASK for value in range(256))


def opposite_of(direction):
    return (direction + 2) % 4


def has_bit_set(value, bit):
    return value & (1 << bit) != 0


def _directions_for(edge_value):
    return tuple(
        direction for direction in DIRECTIONS if has_bit_set(edge_value, direction)
    )


# For every possible edge value, which directions have their bit set
SET_DIRECTIONS = [_directions_for(edge_value) for edge_value in range(16)]


def _draws(rng, high):
    while True:
        yield from rng.integers(0, high, size=DRAW_BATCH_SIZE).tolist()


class GridGraph:
    def __init__(self, rows, cols):
        if not isinstance(rows, int) or not isinstance(cols, int):
            raise ValueError("rows and cols need to be integers")
        if rows <= 0 or cols <= 0:
            raise ValueError(f"A {rows}x{cols} grid needs positive dimensions")

        self.rows = rows
        self.cols = cols
        self.size = rows * cols

        self.nodes = bytearray(self.size)
        self.root = None
        self.linked = False

        self._init_boundaries()
        self._init_jump_table()
        self._init_neighbors_table()

    def _init_boundaries(self):
        # Set a bit in each node along the edges of the grid; corners get two.
        # The random walk then never has to check where the grid ends.
        for i in range(self.cols):
            self.nodes[i] |= 1 << UP
        for i in range(self.size - self.cols, self.size):
            self.nodes[i] |= 1 << DOWN
        for i in range(0, self.size, self.cols):
            self.nodes[i] |= 1 << LEFT
        for i in range(self.cols - 1, self.size, self.cols):
            self.nodes[i] |= 1 << RIGHT

    def _init_jump_table(self):
        # Adding jump[direction] to a node's index gives the index of its
        # neighbor in that direction
        self.jump = [0] * len(DIRECTIONS)
        self.jump[UP] = -self.cols
        self.jump[RIGHT] = 1
        self.jump[DOWN] = self.cols
        self.jump[LEFT] = -1

    def _init_neighbors_table(self):
        self.neighbors = []

        for edge_value in range(16):
            available = [
                direction
                for direction in DIRECTIONS
                if not has_bit_set(edge_value, direction)
            ]

            # Only a 1x1 grid has a node with all four edge bits set, and the
            # random walk never starts there
            if not available:
                self.neighbors.append(())
                continue

            self.neighbors.append(
                tuple(
                    available[slot % len(available)] for slot in range(NEIGHBOR_SLOTS)
                )
            )

    def boundary(self, index):
        """The directions that step off the grid from this node."""
        if self.linked:
            raise RuntimeError("The boundary bits have been replaced by child bits")

        return SET_DIRECTIONS[self.nodes[index] & EDGE_MASK]

    def children(self, index):
        if not self.linked:
            raise RuntimeError("span() needs to be called before traversing")

        node = self.nodes[index]
        return [
            index + self.jump[direction]
            for direction in SET_DIRECTIONS[node & EDGE_MASK]
        ]

    def parent(self, index):
        if not self.linked:
            raise RuntimeError("span() needs to be called before traversing")

        if index == self.root:
            return None

        return index + self.jump[(self.nodes[index] & PARENT_MASK) >> PARENT_SHIFT]

    def span(self, rng):
        """
        Turn the grid into a uniformly random spanning tree, using Wilson's
        algorithm: loop-erased random walks from every node not yet in the
        tree, until they hit it.
        """
        if self.root is not None:
            raise RuntimeError("The grid has already been spanned")

        nodes = self.nodes
        jump = self.jump
        neighbors = self.neighbors
        draws = _draws(rng, NEIGHBOR_SLOTS)

        # Make a random node the root of the tree
        self.root = int(rng.integers(0, self.size))
        nodes[self.root] |= IN_TREE

        # The order in which the nodes get connected doesn't affect the
        # distribution of the final tree
        for start in range(self.size):
            # Walk until the tree is hit, recording the direction taken from
            # each node. Walking in a circle overwrites the direction recorded
            # earlier, which is what erases the loop.
            here = start
            while not nodes[here] & IN_TREE:
                node = nodes[here]
                parent_direction = neighbors[node & EDGE_MASK][next(draws)]
                nodes[here] = (node & ~PARENT_MASK) | (
                    parent_direction << PARENT_SHIFT
                )
                here += jump[parent_direction]

            # Retrace the walk from the start, following only the last
            # direction recorded in each node, and add that path to the tree
            here = start
            while not nodes[here] & IN_TREE:
                nodes[here] |= IN_TREE
                here += jump[(nodes[here] & PARENT_MASK) >> PARENT_SHIFT]

        self._link_children()

    def _link_children(self):
        # Every node points towards its parent, but the traversals need to go
        # from a node to its children, so the edge bits get reused for that
        nodes = self.nodes.translate(CLEAR_EDGES)

        for i in range(self.size):
            if i == self.root:
                continue

            parent_direction = (nodes[i] & PARENT_MASK) >> PARENT_SHIFT
            parent = i + self.jump[parent_direction]
            nodes[parent] |= 1 << opposite_of(parent_direction)

        self.nodes = nodes
        self.linked = True

    def dfs(self):
        """Return the node indices in a preordering, like a depth-first search."""
        order = []
        unprocessed = [self.root]

        while unprocessed:
            index = unprocessed.pop()
            order.append(index)

            unprocessed.extend(self.children(index))

        return order

    def heights(self):
        """The height of every node's subtree; leaves have a height of 0."""
        heights = [0] * self.size

        # Children always come after their parent in a preordering
        for index in reversed(self.dfs()):
            height = 0
            for child in self.children(index):
                height = max(height, heights[child] + 1)

            heights[index] = height

        return heights

    def sdfs(self):
        """
        As dfs(), but the shortest branch always gets visited first. The random
        spanning tree has a few very long branches and many very short ones,
        so this keeps the traversal local for longer.
        """
        heights = self.heights()

        order = []
        unprocessed = [self.root]

        while unprocessed:
            index = unprocessed.pop()
            order.append(index)

            # Pushing the tallest first means the shortest gets popped first
            children = sorted(
                self.children(index), key=heights.__getitem__, reverse=True
            )
            unprocessed.extend(children)

        return order

    def bfs(self):
        """Return the node indices sorted by distance from the root."""
        order = []
        unprocessed = deque([self.root])

        while unprocessed:
            index = unprocessed.popleft()
            order.append(index)

            unprocessed.extend(self.children(index))

        return order
