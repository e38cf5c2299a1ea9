# noise_viewer.py

"""
================================================================================
ANIMATED NOISE PREVIEW
================================================================================
A Pygame window that renders the noise field live, sliding the sampling
window through Z as wall-clock time passes. The seed is taken from the
startup time, so every launch shows a different field.

Controls:
    ESC    quit
    SPACE  pause / resume the animation
    S      save the current frame as a PNG
================================================================================
"""
import argparse
import logging
import sys
import time

import pygame
from PIL import Image

from supersimplex_field import config as DEFAULTS
from supersimplex_field.dispatch import dispatch
from supersimplex_field.errors import FieldConfigError
from supersimplex_field.generator import NoiseFieldGenerator

BACKGROUND_COLOR = (10, 10, 20)


class ViewerApp:
    """The main application class for the animated noise viewer."""
    def __init__(self, width: int = DEFAULTS.PREVIEW_WIDTH, height: int = DEFAULTS.PREVIEW_HEIGHT, workers: int = 1):
        self.logger = logging.getLogger(__name__)

        self.logger.info("Initializing Pygame...")
        pygame.init()

        self.width = width
        self.height = height
        self.workers = workers
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("SuperSimplex Noise")

        self.clock = pygame.time.Clock()
        self.is_running = True
        self.is_paused = False

        self.startup_time = time.time()
        self.seed = float(int(self.startup_time))
        self.elapsed_ms = 0.0
        self.frame_surface = None
        self.frame_buffer = None
        self.logger.info(f"Viewer seed: {self.seed:g}")

    def run(self):
        """The main application loop."""
        while self.is_running:
            self.handle_events()
            self.update()
            self.draw()
            self.clock.tick(DEFAULTS.PREVIEW_FPS)

        self.logger.info("Exiting viewer.")
        pygame.quit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.is_running = False
                elif event.key == pygame.K_SPACE:
                    self.is_paused = not self.is_paused
                elif event.key == pygame.K_s:
                    self.save_frame()

    def update(self):
        """Renders the frame for the current point in time."""
        if self.is_paused and self.frame_surface is not None:
            return
        if not self.is_paused:
            self.elapsed_ms = (time.time() - self.startup_time) * 1000.0

        frame = NoiseFieldGenerator.frame_config(self.elapsed_ms, self.width, self.height, self.seed)
        self.frame_buffer = dispatch(frame, bytearray(frame.buffer_size), workers=self.workers, logger=self.logger)
        self.frame_surface = pygame.image.frombuffer(bytes(self.frame_buffer), (self.width, self.height), 'RGBA')
        self.logger.debug(f"z: {self.elapsed_ms / DEFAULTS.PREVIEW_MS_PER_Z_UNIT}")

    def save_frame(self):
        """Writes the current frame to disk with Pillow."""
        if self.frame_buffer is None:
            return
        filename = f"noise_frame_{int(self.elapsed_ms)}.png"
        Image.frombytes('RGBA', (self.width, self.height), bytes(self.frame_buffer)).save(filename)
        self.logger.info(f"Saved frame to '{filename}'")

    def draw(self):
        """Handles all rendering for the application."""
        self.screen.fill(BACKGROUND_COLOR)
        if self.frame_surface is not None:
            self.screen.blit(self.frame_surface, (0, 0))

        state = "Paused" if self.is_paused else f"{self.clock.get_fps():.1f} FPS"
        pygame.display.set_caption(f"SuperSimplex Noise | {state}")
        pygame.display.flip()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Animated SuperSimplex noise preview.")
    parser.add_argument("--width", type=int, default=DEFAULTS.PREVIEW_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULTS.PREVIEW_HEIGHT)
    parser.add_argument("--workers", type=int, default=1)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger(__name__)
    try:
        NoiseFieldGenerator.frame_config(0.0, args.width, args.height, 0.0)
    except FieldConfigError as e:
        logger.critical(f"Invalid preview size: {e}")
        return 1

    ViewerApp(width=args.width, height=args.height, workers=args.workers).run()
    return 0

if __name__ == '__main__':
    sys.exit(main())
