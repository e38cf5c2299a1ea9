# bake_noise.py

"""
================================================================================
OFFLINE NOISE FIELD BAKER SCRIPT
================================================================================
This script is a command-line tool for rendering a noise field to disk
("baking"). Each Z slice is saved as an RGBA PNG named by the hash of its
content, so identical slices are stored only once. The raw buffer, a manifest
and the exact generation config are written alongside.

Usage:
    python bake_noise.py --config path/to/your/config.json
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import hashlib
import multiprocessing

from supersimplex_field.generator import NoiseFieldGenerator
from supersimplex_field.errors import FieldConfigError

RAW_BUFFER_FILENAME = "field.rgba"

# --- Helper for Slice Deduplication ---
def save_slice_image(image, directory: str, file_hash: str) -> str:
    """Saves one Z slice as a PNG unless a slice with the same hash exists."""
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{file_hash}.png")
    if not os.path.exists(file_path):
        image.save(file_path, 'PNG', optimize=True)
    return file_path

# --- Main Baking Function ---
def bake_noise(config_path: str, output_dir: str = None, workers: int = None) -> str:
    """
    Loads a configuration, renders the noise field and saves it as a package
    of slice images plus manifest.

    Returns:
        str: The output directory, or None if the bake did not run.
    """
    logger = logging.getLogger("Baker")

    # 1. --- Load Configuration ---
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None

    noise_params = config.get('noise_parameters', {})

    # 2. --- Initialize the Generator (validates everything up front) ---
    try:
        generator = NoiseFieldGenerator(config=noise_params, logger=logger)
    except FieldConfigError as e:
        logger.critical(f"Invalid noise configuration: {e}")
        return None

    if output_dir is None:
        output_dir = os.path.join("baked_fields", f"seed_{generator.field_config.seed:g}")
    if workers is None:
        workers = max(1, multiprocessing.cpu_count() - 1)
    logger.info(f"Using {workers} worker process(es).")

    # 3. --- Render ---
    buffer = generator.generate(workers=workers, progress=True)

    # 4. --- Save Slices with Deduplication ---
    slices_dir = os.path.join(output_dir, "slices")
    slice_hashes = []
    for image in generator.to_images(buffer):
        file_hash = hashlib.sha256(image.tobytes()).hexdigest()
        save_slice_image(image, slices_dir, file_hash)
        slice_hashes.append(file_hash)
    unique_count = len(set(slice_hashes))

    with open(os.path.join(output_dir, RAW_BUFFER_FILENAME), 'wb') as f:
        f.write(buffer)

    # 5. --- Manifest & "birth certificate" ---
    manifest = {
        "target_dims": list(generator.field_config.target_dims),
        "bytes_per_cell": 4,
        "buffer_file": RAW_BUFFER_FILENAME,
        "buffer_sha256": hashlib.sha256(buffer).hexdigest(),
        "slices": slice_hashes,
    }
    with open(os.path.join(output_dir, "manifest.json"), 'w') as f:
        json.dump(manifest, f, indent=2)

    with open(os.path.join(output_dir, "generation_config.json"), 'w') as f:
        json.dump(generator.settings, f, indent=4)

    logger.info(f"Slices: {len(slice_hashes)} total -> {unique_count} unique saved")
    logger.info(f"Baked field and manifest.json saved to: {output_dir}")
    return output_dir


# --- Command-Line Interface ---
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline baker for fractal SuperSimplex noise fields.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file (keys under 'noise_parameters')."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory. Defaults to baked_fields/seed_<seed>."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes. Defaults to one less than the CPU count."
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    return 0 if bake_noise(args.config, args.output, args.workers) else 1

if __name__ == "__main__":
    sys.exit(main())
