import zipfile
import io
import json
from datetime import datetime

from glitchkit.core.types import Kit
from glitchkit.export.wav import encode_wav

ARCHIVE_NAME = "glitch_kit.zip"


def shot_filename(position: int) -> str:
    """glitch_shot_01.wav for the first shot in a kit."""
    return f"glitch_shot_{position + 1:02d}.wav"


class Exporter:
    @staticmethod
    def create_kit_zip(kit: Kit, name: str = "GlitchKit", params: dict = None) -> bytes:
        """
        One WAV per shot plus kit_info.json:
        {
          'kit_name': ..., 'created_at': ..., 'requested': 8, 'produced': 6,
          'shots': [{'id': 0, 'file': 'glitch_shot_01.wav', 'duration_s': ...}, ...]
        }
        """
        buffer = io.BytesIO()

        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
            shots_meta = []
            for position, shot in enumerate(kit):
                filename = shot_filename(position)
                zip_file.writestr(filename, encode_wav(shot.buffer))
                shots_meta.append({
                    "id": shot.id,
                    "file": filename,
                    "duration_s": shot.buffer.duration,
                    "channels": shot.buffer.num_channels,
                    "sample_rate": shot.buffer.sample_rate,
                })

            meta = {
                "kit_name": name,
                "created_at": datetime.now().isoformat(),
                "requested": kit.requested,
                "produced": kit.produced,
                "params": params,
                "shots": shots_meta,
            }
            zip_file.writestr("kit_info.json", json.dumps(meta, indent=2))

        return buffer.getvalue()
