# streamprep/services/convert/worker.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional

from streamprep.common.logging import get_logger
from streamprep.domain.dataclasses.reports import ConversionReport
from streamprep.domain.entities.profile import EncodingProfile
from streamprep.domain.errors import CommandError
from streamprep.domain.policies.command_builder import CommandBuilder
from streamprep.domain.policies.profile_expander import ProfileExpander
from streamprep.domain.ports.files import FileOpsPort
from streamprep.domain.ports.process import CommandRunnerPort

logger = get_logger(__name__)


class ConversionWorker:
    """
    Encodes renditions one profile at a time, in declaration order:
    expand -> build command -> claim output -> ffmpeg -> flvcheck -> move.
    All encodes share one working directory, so nothing runs in parallel.
    """

    def __init__(
        self,
        *,
        expander: ProfileExpander,
        builder: CommandBuilder,
        runner: CommandRunnerPort,
        file_ops: FileOpsPort,
        workdir: Path,
        flvcheck_bin: Optional[Path | str] = None,
        env: Optional[Mapping[str, str]] = None,
        dry_run: bool = False,
    ) -> None:
        self.expander = expander
        self.builder = builder
        self.runner = runner
        self.file_ops = file_ops
        self.workdir = Path(workdir)
        self.flvcheck_bin = str(flvcheck_bin) if flvcheck_bin else None
        self.env = dict(env or {})
        self.dry_run = dry_run

    def run(self, profiles: Iterable[EncodingProfile], rpt: ConversionReport) -> ConversionReport:
        for profile in profiles:
            if not profile.enabled:
                continue
            rpt.planned += 1
            self.process_one(profile, rpt)
        return rpt

    def process_one(self, profile: EncodingProfile, rpt: ConversionReport) -> None:
        plan = self.expander.expand(profile)
        rpt.plans.append(plan)
        rpt.extend_warnings(plan.warnings)
        rpt.outputs.append(plan.output_path)

        tmp_mp4 = self.workdir / f"{plan.short_name}.mp4"
        cmd = self.builder.build(plan, tmp_mp4)
        if self.dry_run:
            rpt.commands.append(cmd)
            return

        # a failed claim or encode only costs this rendition
        try:
            skipped = self.expander.claim_output(plan)
            if skipped is not None:
                rpt.skipped += 1
                rpt.warn(skipped)
                return
            rpt.commands.append(cmd)
            self.runner.run(cmd, env=self.env)
            if self.flvcheck_bin:
                # is the file streamable by the media server?
                self.runner.run([self.flvcheck_bin, "-n", str(tmp_mp4)])
            logger.debug("Moving %s to %s", tmp_mp4, plan.output_path)
            self.file_ops.move_file(tmp_mp4, plan.output_path, overwrite=True)
        except (CommandError, OSError) as e:
            logger.error("Rendition %s failed: %s", plan.output_path, e)
            rpt.add_error(str(plan.output_path), str(e))
            return

        rpt.encoded += 1
        logger.info("Wrote %s (%s, %s)", plan.output_path, plan.dimensions, plan.total_bitrate)
