"""
High-level orchestration for ncaa-checkver.

The checker is responsible for:
  - switching the site repo to the requested upstream branch,
  - locating the makefile and looking up the module,
  - printing the result, and
  - switching the site repo back to the branch it was on.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from .config import Config
from .git_adapter import GitRunner, checked_out, remote_ref
from .makefile import ModuleVersion, find_module_version, format_result, locate_makefile

LOG = logging.getLogger(__name__)


def run_check(
    config: Config,
    runner: Optional[GitRunner] = None,
    out: Optional[TextIO] = None,
) -> Optional[ModuleVersion]:
    """
    Look up config.module on config.branch of the site repo.

    Prints the result line to out (stdout by default) and returns the
    version found, or None when the module is not declared. Errors
    propagate unchanged; once the branch has been switched, the original
    branch is restored before they do.
    """

    if out is None:
        out = sys.stdout

    target = remote_ref(config.branch, config.remote)
    with checked_out(target, config.repo_path, runner) as original_ref:
        LOG.info("Switched %s from %s to %s", config.repo_path, original_ref, target)

        makefile_path = locate_makefile(config.repo_path, config.makefile)
        LOG.info("Scanning %s for module %r", makefile_path, config.module)

        version = find_module_version(makefile_path, config.module)
        print(format_result(config.module, version), file=out)

    return version
