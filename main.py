import argparse
import os
import sys

from artisan.config import DATA_DIR, DEFAULT_SAVE_FILE, SAVE_GAME_DIR
from artisan.core.game_manager import GameManager
from artisan.crafting.errors import describe_failure
from artisan.utils.logger import Logger


def parse_pair(text: str):
    """'iron_ore:5' -> ('iron_ore', 5). Quantity defaults to 1."""
    name, _, qty = text.partition(':')
    try:
        return name, int(qty) if qty else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected name:quantity, got '{text}'")


def main():
    parser = argparse.ArgumentParser(description='Artisan crafting engine')
    parser.add_argument('--save', '-s', type=str, default=DEFAULT_SAVE_FILE,
                        help='Save file to load/save (default: default_save.json)')
    parser.add_argument('--new', action='store_true', help='Ignore any existing save')
    parser.add_argument('--grant', '-g', type=parse_pair, action='append', default=[],
                        metavar='MATERIAL:QTY', help='Add materials before crafting')
    parser.add_argument('--craft', '-c', type=parse_pair, action='append', default=[],
                        metavar='RECIPE:QTY', help='Queue a crafting job')
    parser.add_argument('--seconds', type=float, default=None,
                        help='Stop the loop after this many seconds')
    parser.add_argument('--log-level', type=str, default=None, help='DEBUG, INFO, WARNING, ERROR')
    args = parser.parse_args()

    if args.log_level:
        Logger.set_level(args.log_level)

    create_initial_directories()
    game = GameManager(args.save)
    if not args.new and not game.load():
        return 1

    engine = game.crafting_manager
    for material_id, qty in args.grant:
        if not engine.add_material(material_id, qty):
            Logger.warning("main", f"Could not grant {qty}x {material_id}")
    for recipe_id, qty in args.craft:
        item, reason = engine.start_crafting(recipe_id, qty)
        if not item:
            Logger.warning("main", f"Cannot craft {qty}x {recipe_id}: {describe_failure(reason)}")

    game.run(max_seconds=args.seconds)
    game.save()
    return 0


def create_initial_directories():
    os.makedirs(SAVE_GAME_DIR, exist_ok=True)
    os.makedirs(os.path.join(DATA_DIR, "crafting"), exist_ok=True)


if __name__ == "__main__":
    sys.exit(main())
