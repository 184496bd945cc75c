from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Tuple

import pygame

from block_crush.game import BlockCrushGame, GameConfig, TOTAL_STAGES, color_for
from block_crush.game.shapes import Shape
from block_crush.logger import configure_logging
from block_crush.storage import JsonFileStore
from block_crush.visualization.drag import DragTracker


CELL_SIZE = 36
MARGIN = 20
TRAY_SLOT_CELLS = 5
EMPTY_COLOR = (40, 40, 48)
BACKGROUND = (15, 15, 20)
DEFAULT_STORE = Path.home() / ".block_crush" / "storage.json"


def board_origin() -> Tuple[int, int]:
    return MARGIN, MARGIN + 30


def tray_origin(game: BlockCrushGame) -> Tuple[int, int]:
    bx, by = board_origin()
    return bx + game.grid.size * CELL_SIZE + MARGIN, by


def cell_from_point(game: BlockCrushGame, x: int, y: int) -> Optional[Tuple[int, int]]:
    bx, by = board_origin()
    col = (x - bx) // CELL_SIZE
    row = (y - by) // CELL_SIZE
    if game.grid.is_inside(row, col):
        return int(row), int(col)
    return None


def tray_slot_from_point(game: BlockCrushGame, x: int, y: int) -> Optional[int]:
    tx, ty = tray_origin(game)
    slot_px = TRAY_SLOT_CELLS * CELL_SIZE // 2
    if not tx <= x < tx + slot_px:
        return None
    slot = (y - ty) // slot_px
    if 0 <= slot < len(game.supply):
        return int(slot)
    return None


def draw_shape(screen: pygame.Surface, shape: Shape, x0: int, y0: int, size: int, color, width: int = 0) -> None:
    for py in range(shape.shape[0]):
        for px in range(shape.shape[1]):
            if shape[py, px]:
                rect = pygame.Rect(x0 + px * size, y0 + py * size, size - 1, size - 1)
                pygame.draw.rect(screen, color, rect, width)


def draw_board(screen: pygame.Surface, game: BlockCrushGame) -> None:
    bx, by = board_origin()
    grid = game.grid
    for row in range(grid.size):
        for col in range(grid.size):
            cell = grid.cell(row, col)
            color = EMPTY_COLOR if cell is None else pygame.Color(color_for(cell.color_index))
            rect = pygame.Rect(bx + col * CELL_SIZE, by + row * CELL_SIZE, CELL_SIZE - 1, CELL_SIZE - 1)
            pygame.draw.rect(screen, color, rect)


def draw_preview(screen: pygame.Surface, game: BlockCrushGame) -> None:
    slot = game.dragging_slot
    preview = game.drag_preview
    if slot is None or preview is None:
        return
    shape = game.shape_for_slot(slot)
    if shape is None:
        return
    bx, by = board_origin()
    color = pygame.Color(color_for(game.supply[slot]))
    draw_shape(screen, shape, bx + preview.col * CELL_SIZE, by + preview.row * CELL_SIZE, CELL_SIZE, color, 3)


def draw_tray(screen: pygame.Surface, game: BlockCrushGame) -> None:
    tx, ty = tray_origin(game)
    small = CELL_SIZE // 2
    slot_px = TRAY_SLOT_CELLS * small
    for slot, shape in enumerate(game.supply_shapes()):
        if shape is None or slot == game.dragging_slot:
            continue
        y0 = ty + slot * slot_px
        draw_shape(screen, shape, tx, y0, small, pygame.Color(color_for(game.supply[slot])))
        if slot == game.selected_slot:
            outline = pygame.Rect(tx - 2, y0 - 2, shape.shape[1] * small + 4, shape.shape[0] * small + 4)
            pygame.draw.rect(screen, (255, 255, 255), outline, 2)


def draw_ghost(screen: pygame.Surface, game: BlockCrushGame, tracker: DragTracker) -> None:
    slot = game.dragging_slot
    if slot is None or tracker.pointer is None:
        return
    shape = game.shape_for_slot(slot)
    if shape is None:
        return
    x, y = tracker.pointer
    color = pygame.Color(color_for(game.supply[slot]))
    draw_shape(screen, shape, int(x), int(y), CELL_SIZE, color)


def run(config: GameConfig, store_path: Path) -> None:
    pygame.init()
    try:
        game = BlockCrushGame(config, store=JsonFileStore(store_path))
        tracker = DragTracker(game)
        bx, by = board_origin()
        width = bx + game.grid.size * CELL_SIZE + MARGIN * 2 + TRAY_SLOT_CELLS * CELL_SIZE // 2
        height = by + max(game.grid.size * CELL_SIZE, config.pieces_per_round * TRAY_SLOT_CELLS * CELL_SIZE // 2) + MARGIN
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(f"Block Crush - Stage {config.stage}")
        font = pygame.font.SysFont(None, 26)

        key_to_index = {
            pygame.K_1: 0,
            pygame.K_2: 1,
            pygame.K_3: 2,
        }

        running = True
        clock = pygame.time.Clock()
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        if game.selected_slot is not None or tracker.dragging:
                            tracker.cancel()
                            game.deselect()
                        else:
                            running = False
                    elif event.key == pygame.K_n:
                        tracker.cancel()
                        game.play_again()
                    elif event.key in key_to_index:
                        game.select(key_to_index[event.key])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    slot = tray_slot_from_point(game, *event.pos)
                    cell = cell_from_point(game, *event.pos)
                    if slot is not None:
                        tracker.press(slot, *event.pos)
                    elif cell is not None:
                        game.click_cell(*cell)
                elif event.type == pygame.MOUSEMOTION:
                    tracker.move(*event.pos, cell_from_point(game, *event.pos))
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    tracker.release()

            screen.fill(BACKGROUND)
            draw_board(screen, game)
            draw_preview(screen, game)
            draw_tray(screen, game)
            draw_ghost(screen, game, tracker)
            header = font.render(f"Score: {game.score}    Best: {game.best_score}", True, (230, 230, 230))
            screen.blit(header, (MARGIN, 8))
            if game.game_over:
                over = font.render("Game Over - Press N to play again", True, (255, 100, 100))
                screen.blit(over, over.get_rect(center=(width // 2, height // 2)))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--stage", type=int, default=1, help=f"Stage number 1..{TOTAL_STAGES}, seeds the piece draw")
    p.add_argument("--seed", type=int, default=None, help="Reproducible piece sequence")
    p.add_argument("--size", type=int, default=9)
    p.add_argument("--store", type=Path, default=DEFAULT_STORE)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(args.log_level.upper())
    config = GameConfig(grid_size=args.size, stage=args.stage, random_seed=args.seed)
    run(config, args.store)


if __name__ == "__main__":  # pragma: no cover
    main()
