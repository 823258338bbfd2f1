# streamprep/services/convert/service.py
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from streamprep.common.logging import get_logger
from streamprep.common.settings import Settings
from streamprep.domain.dataclasses.options import RunOptions
from streamprep.domain.dataclasses.reports import ConversionReport
from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.errors import ConfigError
from streamprep.domain.policies.command_builder import CommandBuilder
from streamprep.domain.policies.geometry_reconciler import GeometryReconciler
from streamprep.domain.policies.keyframes import load_timecode_file
from streamprep.domain.policies.profile_expander import ProfileExpander
from streamprep.domain.ports.files import FileOpsPort
from streamprep.domain.ports.probe import MediaProbePort
from streamprep.domain.ports.process import CommandRunnerPort
from streamprep.services.convert.worker import ConversionWorker
from streamprep.services.filesystem.local_file_ops import LocalFileOps
from streamprep.services.probe.exiftool_adapter import ExifToolAdapter
from streamprep.services.probe.ffprobe_adapter import FFprobeAdapter
from streamprep.services.probe.mediainfo_adapter import MediaInfoAdapter
from streamprep.services.process.runner import SubprocessRunner
from streamprep.services.profiles.loader import load_profiles
from streamprep.services.publish.fms_page import FmsPublisher

logger = get_logger(__name__)


class ConversionService:
    """
    High-level orchestrator for one input file:
    probes -> geometry -> profiles -> per-profile encodes -> publish.

    Geometry is derived once, before any profile; a GeometryError (or any
    other StreamprepError raised up front) aborts the whole run.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        runner: Optional[CommandRunnerPort] = None,
        file_ops: Optional[FileOpsPort] = None,
        probes: Optional[Tuple[MediaProbePort, MediaProbePort, MediaProbePort]] = None,
    ) -> None:
        self.cfg = settings
        self.runner: CommandRunnerPort = runner or SubprocessRunner()
        self.file_ops: FileOpsPort = file_ops or LocalFileOps()
        # (container, stream, tag)
        self.probes = probes or (
            MediaInfoAdapter(settings.path_mediainfo, timeout_sec=settings.probe_timeout_sec),
            FFprobeAdapter(settings.path_ffprobe, timeout_sec=settings.probe_timeout_sec),
            ExifToolAdapter(
                settings.path_exiftool,
                config_file=settings.exiftool_config,
                timeout_sec=settings.probe_timeout_sec,
            ),
        )

    # --- preflight ------------------------------------------------------------

    def check_tools(self) -> None:
        missing = [f"{name}:{path}" for name, path in self.cfg.tool_paths().items() if not Path(path).exists()]
        if missing:
            raise ConfigError(f"Path {', '.join(missing)} doesn't exist")

    def probe_all(self, input_file: Path) -> Tuple[ProbeResult, ProbeResult, ProbeResult]:
        container, stream, tag = self.probes
        return container.probe(input_file), stream.probe(input_file), tag.probe(input_file)

    def encoder_env(self, workdir: Path) -> Dict[str, str]:
        env = {"TMPDIR": str(workdir)}
        if self.cfg.preset_dir:
            env["FFMPEG_DATADIR"] = str(self.cfg.preset_dir)
        return env

    # --- main ---------------------------------------------------------------

    def run(self, options: RunOptions) -> ConversionReport:
        rpt = ConversionReport()
        rpt.start()

        self.check_tools()

        input_file = Path(options.input_file)
        if not input_file.is_file():
            raise ConfigError(f"Input file '{input_file}' doesn't exist.")
        logger.debug("Input file: %s", input_file)

        output_prefix = options.resolved_output_prefix()
        logger.debug("Output prefix: %s", output_prefix)
        self.file_ops.ensure_dir(output_prefix.parent)

        timecodes: List[str] = []
        if options.keyframe_file:
            timecodes, tc_warnings = load_timecode_file(options.keyframe_file)
            rpt.extend_warnings(tc_warnings)

        # 1) Probe + reconcile once for all profiles
        container, stream, tags = self.probe_all(input_file)
        reconciler = GeometryReconciler()
        geometry = reconciler.reconcile(container, stream, tags)
        rpt.geometry = geometry
        rpt.extend_warnings(reconciler.warnings)

        # 2) Profiles, in declaration order
        profiles = load_profiles(self.cfg.profile_files)
        logger.debug("Profiles: %s", ", ".join(str(p) for p in self.cfg.profile_files))

        self.cfg.path_tmpdir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(dir=str(self.cfg.path_tmpdir), prefix="streamprep-") as tmp:
            workdir = Path(tmp)
            expander = ProfileExpander(
                geometry,
                output_prefix,
                name_suffix=self.cfg.name_suffix,
                force=options.force,
                file_ops=self.file_ops,
            )
            builder = CommandBuilder(
                geometry,
                input_file,
                ffmpeg_bin=self.cfg.path_ffmpeg,
                video_preset=self.cfg.video_preset,
                watermark=options.watermark,
                keyframe_timecodes=timecodes,
                audio_delay=options.audio_delay,
                quiet=options.quiet,
                test=options.test,
            )
            worker = ConversionWorker(
                expander=expander,
                builder=builder,
                runner=self.runner,
                file_ops=self.file_ops,
                workdir=workdir,
                flvcheck_bin=self.cfg.path_flvcheck,
                env=self.encoder_env(workdir),
                dry_run=options.dry_run,
            )
            worker.run(profiles, rpt)

            # 3) Publish pages for the media server
            if self.cfg.fms_enabled and not options.dry_run:
                publisher = FmsPublisher(self.cfg, self.runner, self.file_ops, force=options.force)
                existing = [p for p in rpt.outputs if self.file_ops.file_exists(p)]
                rpt.published = publisher.publish(existing, geometry, workdir)

        rpt.stop()
        return rpt
