# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SoundFont to SFZ Converter - Converts a SoundFont file into SFZ instruments.

For every preset the converter produces:
- "<base> <preset>.sfz": the SFZ document
- "<base> <preset> Samples/": WAV files of the samples the preset uses

With bundle=True everything is packed into "<base>_sfz_bundle.zip" instead.
"""

import zipfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .errors import WavEncodingError
from .parser import SoundFontParser
from .sfz import SFZWriter, preset_file_name, sample_file_name, sample_folder_name
from .wav import sample_to_wav


class SoundFontConverter:
    """
    Converts a SoundFont file into SFZ documents and WAV samples.
    """

    def __init__(self, sf_path, output_dir, base_name=None, preset_filter=None, bundle=False):
        """
        Initializes the SoundFont Converter.

        Args:
            sf_path: The path to the SoundFont file.
            output_dir: The output directory path.
            base_name: Prefix of every output name (default: the SoundFont file stem).
            preset_filter: Only convert presets whose name contains this text (case-insensitive).
            bundle: Write a single zip archive instead of loose files.
        """
        self.sf_path = Path(sf_path)
        self.output_dir = Path(output_dir)
        self.base_name = base_name or self.sf_path.stem
        self.preset_filter = preset_filter
        self.bundle = bundle
        self.parser = SoundFontParser(self.sf_path)

    def convert(self):
        """
        Converts the file.

        Returns:
            The list of written file paths.
        """
        print(f"Parsing file: {self.sf_path}")
        bank = self.parser.parse()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        print(f"Converting to: {self.output_dir}")

        writer = SFZWriter(bank, self.base_name)
        presets = self._select_presets(bank)

        # Relative output path -> file contents
        outputs = {}
        preset_samples = {}
        self._warn_duplicate_presets(presets)
        for idx, preset in presets:
            regions = writer.regions(idx)
            outputs[preset_file_name(self.base_name, preset.name)] = writer.render_preset(idx, regions).encode("utf-8")
            preset_samples[idx] = sorted({region.sample_index for region in regions})

        for warning in writer.warnings:
            print(f"    WARNING: {warning}")
        print(f"  Rendered: {len(presets)} SFZ documents")

        needed = sorted({sample_idx for indices in preset_samples.values() for sample_idx in indices})
        self._warn_duplicate_names(bank, needed)
        wav_data = self._encode_samples_parallel(bank, needed)

        for idx, preset in presets:
            folder = sample_folder_name(self.base_name, preset.name)
            for sample_idx in preset_samples[idx]:
                if sample_idx in wav_data:
                    outputs[f"{folder}/{sample_file_name(bank.samples[sample_idx])}"] = wav_data[sample_idx]

        if self.bundle:
            written = [self._write_bundle(outputs)]
        else:
            written = self._write_files(outputs)

        print("Conversion complete!")
        return written

    def _select_presets(self, bank):
        """
        Visible presets, narrowed down by the name filter if one was given.
        """
        presets = bank.visible_presets()
        if self.preset_filter:
            needle = self.preset_filter.lower()
            presets = [(idx, preset) for idx, preset in presets if needle in preset.name.lower()]
        return presets

    def _warn_duplicate_presets(self, presets):
        seen = {}
        for _, preset in presets:
            filename = preset_file_name(self.base_name, preset.name)
            if filename in seen:
                print(f"    WARNING: Duplicate preset name found. \"{seen[filename]}\" "
                      f"and \"{preset.name}\" both map to \"{filename}\"")
            else:
                seen[filename] = preset.name

    def _warn_duplicate_names(self, bank, sample_indices):
        seen = {}
        for sample_idx in sample_indices:
            filename = sample_file_name(bank.samples[sample_idx])
            if filename in seen:
                print(f"    WARNING: Duplicate sample name found. \"{bank.samples[seen[filename]].name}\" "
                      f"and \"{bank.samples[sample_idx].name}\" both map to \"{filename}\"")
            else:
                seen[filename] = sample_idx

    def _encode_samples_parallel(self, bank, sample_indices):
        """
        Encodes samples to WAV in parallel with progress display.

        Returns:
            A dict mapping sample index to WAV bytes. Samples that fail to
            encode are reported and left out.
        """
        total_tasks = len(sample_indices)
        print(f"  Processing {total_tasks} samples...")

        results = {}
        if not total_tasks:
            return results

        with ThreadPoolExecutor() as executor:
            future_to_idx = {
                executor.submit(sample_to_wav, bank.samples[sample_idx]): sample_idx
                for sample_idx in sample_indices
            }

            for completed, future in enumerate(as_completed(future_to_idx), 1):
                sample_idx = future_to_idx[future]
                try:
                    results[sample_idx] = future.result()
                except WavEncodingError as e:
                    print(f"\n  ERROR processing sample {sample_idx}: {e}")

                # Show progress inline
                progress = (completed / total_tasks) * 100
                print(f"    Progress: {completed}/{total_tasks} ({progress:.1f}%)", end="\r")

            # Print newline after progress is complete
            print()

        return results

    def _output_path(self, relative_path):
        """
        Joins a relative output path onto the output directory.

        Raises:
            ValueError: If the path would land outside the output directory.
        """
        root = self.output_dir.resolve()
        resolved = (root / relative_path).resolve()
        if resolved == root or root not in resolved.parents:
            raise ValueError(f"Output path \"{relative_path}\" is outside {self.output_dir}")
        return self.output_dir / relative_path

    def _write_files(self, outputs):
        paths = {relative_path: self._output_path(relative_path) for relative_path in outputs}

        written = []
        for relative_path, data in outputs.items():
            output_path = paths[relative_path]
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(data)
            written.append(output_path)

        print(f"  Created: {len(written)} files in {self.output_dir}")
        return written

    def _write_bundle(self, outputs):
        for relative_path in outputs:
            self._output_path(relative_path)

        bundle_path = self._output_path(f"{self.base_name}_sfz_bundle.zip")
        with zipfile.ZipFile(bundle_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for relative_path, data in outputs.items():
                zf.writestr(relative_path, data)

        print(f"  Created: {bundle_path.name} ({len(outputs)} entries)")
        return bundle_path
