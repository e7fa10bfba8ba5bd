import logging
import os
import random
import sys
from collections import deque
from enum import Enum

import pygame

logger = logging.getLogger(__name__)

# Window configuration
WINDOW_WIDTH = 640
WINDOW_HEIGHT = 480
WINDOW_TITLE = "Snake"
CELL_SIZE = 10
TICK_INTERVAL_MS = 100
FRAME_RATE = 60

# Colors (R, G, B)
BACKGROUND_COLOR = (255, 255, 255)
SNAKE_COLOR = (0, 0, 0)
FOOD_COLOR = (255, 0, 0)


class Direction(Enum):
    """Heading of the snake as a unit step in screen coordinates."""

    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def opposite(self):
        dx, dy = self.value
        return Direction((-dx, -dy))

    def accepts(self, proposed):
        """Return True if the heading may change to `proposed` (no reversal)."""
        return proposed != self.opposite


def snap_to_grid(value, cell_size=CELL_SIZE):
    """Snap a raw coordinate onto a grid line.

    Remainders above half a cell round up to the next line. Anything else
    drops a full cell below the lower line, so small values go negative.
    """
    remainder = value % cell_size
    if remainder > cell_size / 2:
        return value + (cell_size - remainder)
    return value - (cell_size + remainder)


def cell_rect(position):
    """Return the pixel rectangle covering the cell at a grid-aligned position."""
    x, y = position
    return pygame.Rect(int(x), int(y), CELL_SIZE, CELL_SIZE)


class Snake:
    """Head position, heading and body path (head first)."""

    def __init__(self, head, direction, path):
        self.head = head
        self.direction = direction
        self.path = deque(path)

    @classmethod
    def initialize(cls):
        """Create a one-cell snake at the origin heading right."""
        origin = (0.0, 0.0)
        return cls(origin, Direction.RIGHT, [origin])

    def __len__(self):
        return len(self.path)

    def next_head(self):
        """Translate the head by one cell in the current direction."""
        head_x, head_y = self.head
        dx, dy = self.direction.value
        return head_x + dx * CELL_SIZE, head_y + dy * CELL_SIZE

    def move(self):
        """Advance one cell, keeping the length."""
        new_head = self.next_head()
        self.path.pop()
        self.head = new_head
        self.path.appendleft(new_head)

    def grow(self):
        """Advance one cell without dropping the tail."""
        new_head = self.next_head()
        self.head = new_head
        self.path.appendleft(new_head)

    def steer(self, direction):
        """Change heading unless it reverses the snake. Returns True if applied."""
        if not self.direction.accepts(direction):
            return False
        self.direction = direction
        return True


class Food:
    """Food cell position and color."""

    def __init__(self, position, color=FOOD_COLOR):
        self.position = position
        self.color = color

    @classmethod
    def spawn(cls, rng=random):
        """Place food at a random grid-aligned point inside the window."""
        x = snap_to_grid(rng.randint(0, WINDOW_WIDTH))
        y = snap_to_grid(rng.randint(0, WINDOW_HEIGHT))
        food = cls((float(x), float(y)))
        logger.debug("Spawned food at %s", food.position)
        return food


def draw_snake(surface, snake):
    """Draw every body cell of the snake."""
    for segment in snake.path:
        pygame.draw.rect(surface, SNAKE_COLOR, cell_rect(segment))


def draw_food(surface, food):
    """Draw the food cell in its own color."""
    pygame.draw.rect(surface, food.color, cell_rect(food.position))


# Arrow keys mapped to the heading they request.
KEY_TO_DIRECTION = {
    pygame.K_UP: Direction.UP,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
}


class Handler:
    """Game controller driven by the host's draw and key-down callbacks."""

    def __init__(self, clock=pygame.time.get_ticks, rng=random):
        self.clock = clock
        self.rng = rng
        self.snake = Snake.initialize()
        self.food = Food.spawn(rng)
        self.start_time = clock()

    def on_start(self):
        """Reset the snake when the window opens."""
        self.snake = Snake.initialize()

    def on_draw(self, helper, surface):
        """Run one tick once the interval has elapsed, then ask for another frame."""
        if self.clock() - self.start_time >= TICK_INTERVAL_MS:
            self.tick(surface)
        helper.request_redraw()

    def tick(self, surface):
        """Eat, move and redraw; an eating tick advances the head two cells."""
        if self.snake.head == self.food.position:
            logger.debug("Food eaten at %s", self.food.position)
            self.snake.grow()
            self.food = Food.spawn(self.rng)
        self.snake.move()

        surface.fill(BACKGROUND_COLOR)
        draw_food(surface, self.food)
        draw_snake(surface, self.snake)

        self.start_time = self.clock()

    def on_key_down(self, key):
        """Steer on arrow keys; other keys are ignored."""
        direction = KEY_TO_DIRECTION.get(key)
        if direction is not None:
            self.snake.steer(direction)


class Window:
    """pygame host: owns the display and dispatches callbacks to a handler."""

    def __init__(self, title=WINDOW_TITLE, size=(WINDOW_WIDTH, WINDOW_HEIGHT)):
        pygame.init()
        pygame.display.set_caption(title)
        self.screen = pygame.display.set_mode(size)
        self.redraw_requested = False

    def request_redraw(self):
        """Mark the current frame for presenting."""
        self.redraw_requested = True

    def run_loop(self, handler):
        """Pump events and draw callbacks until the window is closed."""
        clock = pygame.time.Clock()
        handler.on_start()

        running = True
        while running:
            # Handle window and keyboard events.
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    handler.on_key_down(event.key)
            if not running:
                break

            self.redraw_requested = False
            handler.on_draw(self, self.screen)
            if self.redraw_requested:
                pygame.display.flip()
            clock.tick(FRAME_RATE)

        pygame.quit()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    try:
        window = Window()
    except pygame.error:
        logger.exception("Could not create the game window")
        pygame.quit()
        sys.exit(1)

    logger.info("Starting %s (%dx%d)", WINDOW_TITLE, WINDOW_WIDTH, WINDOW_HEIGHT)
    window.run_loop(Handler())
    logger.info("Window closed")


if __name__ == "__main__":
    main()
