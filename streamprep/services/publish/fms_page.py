# streamprep/services/publish/fms_page.py
from __future__ import annotations

import html
from pathlib import Path
from typing import Iterable, Mapping, Optional

from streamprep.common.logging import get_logger
from streamprep.common.numeric.rounding import round_even
from streamprep.common.settings import Settings
from streamprep.domain.entities.geometry import Geometry
from streamprep.domain.errors import ConfigError
from streamprep.domain.ports.files import FileOpsPort
from streamprep.domain.ports.process import CommandRunnerPort

logger = get_logger(__name__)


def player_width(geometry: Geometry, player_height: int) -> int:
    """Player width that shows the source at its display aspect ratio."""
    return round_even(
        (player_height / geometry.source_height) * geometry.source_width * geometry.pixel_aspect_ratio
    )


def render_template(template: str, replace: Mapping[str, str]) -> str:
    """Substitute every <!-- KEY --> marker."""
    out = template
    for key, value in replace.items():
        out = out.replace(f"<!-- {key} -->", value)
    return out


class FmsPublisher:
    """
    Writes one playback page per rendition and, when an ssh-agent is
    available, copies page and video to the streaming host.
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunnerPort,
        file_ops: FileOpsPort,
        *,
        force: bool = False,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.file_ops = file_ops
        self.force = force

    def publish(self, outputs: Iterable[Path], geometry: Geometry, workdir: Path) -> int:
        width = player_width(geometry, self.settings.flowplayer_height)
        height = self.settings.flowplayer_height
        logger.debug("Flowplayer Dimensions: %sx%s", width, height)

        agent_running = self._agent_running()
        published = 0
        for output in outputs:
            html_file = Path(output).with_suffix(".html")
            if not self.force and self.file_ops.file_exists(html_file):
                logger.warning("html file %s already exists.", html_file)
            else:
                self.write_page(html_file, Path(output), width, height, workdir)
                published += 1
            if agent_running:
                self.runner.run(["scp", str(html_file), self.settings.fms_html_dir])
                self.runner.run(["scp", str(output), self.settings.fms_content_dir])
        return published

    def write_page(self, html_file: Path, mp4_file: Path, width: int, height: int, workdir: Path) -> Path:
        template_file = self.settings.template_file
        try:
            template = template_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"can't open {template_file}: {e}") from e

        techmd = self.runner.run([str(self.settings.path_mediainfo), str(mp4_file)])
        page = render_template(
            template,
            {
                "MP4_FILE": mp4_file.name,
                "TECHMD": html.escape(techmd),
                "FMS_URL": self.settings.fms_url,
                "WIDTH": str(width),
                "HEIGHT": str(height),
            },
        )

        tmp_html = Path(workdir) / html_file.name
        tmp_html.write_text(page, encoding="utf-8")
        self.file_ops.move_file(tmp_html, html_file, overwrite=True)
        logger.debug("Wrote %s", html_file)
        return html_file

    def _agent_running(self) -> bool:
        # pgrep exits 1 when nothing matches
        out: Optional[str] = self.runner.run(["pgrep", "ssh-agent"], ok_codes=(0, 1))
        return bool(out and out.strip())
