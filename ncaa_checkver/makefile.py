"""
Lookup of module download references in a site makefile.

A site makefile declares where each module is downloaded from, e.g.:

    projects[ncaa_scores][download][type] = "git"
    projects[ncaa_scores][download][branch] = "release-1.2"

Only the branch/tag declaration is of interest here; the rest of the
makefile is not parsed.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import MakefileNotFoundError, MakefileUnreadableError, RepositoryUnreadableError

LOG = logging.getLogger(__name__)

DOWNLOAD_REF_RE = re.compile(r'\[download\]\[(branch|tag)\] = "([A-Za-z0-9._-]+)"')


@dataclass
class ModuleVersion:
    """
    The download reference declared for a module.

    kind is either "branch" or "tag".
    """

    module: str
    kind: str
    value: str


def locate_makefile(repo_path: str, makefile_name: str) -> str:
    """
    Return the full path of makefile_name inside repo_path.

    The directory listing must contain an entry with exactly that name.
    """

    try:
        entries = os.listdir(repo_path)
    except OSError as exc:
        raise RepositoryUnreadableError(repo_path) from exc

    makefile_path = os.path.join(repo_path, makefile_name)
    if makefile_name not in entries:
        raise MakefileNotFoundError(makefile_path)

    return makefile_path


def _module_marker(module: str) -> str:
    return f"projects[{module}][download]"


def find_module_version(makefile_path: str, module: str) -> Optional[ModuleVersion]:
    """
    Scan the makefile for the download reference of module.

    Every line mentioning the module's download settings replaces the
    matches kept so far, so the last such line decides the result. A
    later line without a branch/tag declaration (e.g. [download][type])
    therefore clears an earlier match. Returns None when nothing
    matched.
    """

    marker = _module_marker(module)
    matches: List[Tuple[str, str]] = []

    try:
        with open(makefile_path, encoding="utf-8", errors="replace") as handle:
            for line in handle:
                if marker in line:
                    matches = DOWNLOAD_REF_RE.findall(line)
    except OSError as exc:
        raise MakefileUnreadableError(makefile_path) from exc

    if not matches:
        LOG.debug("No download reference for %s in %s", module, makefile_path)
        return None

    kind, value = matches[0]
    return ModuleVersion(module=module, kind=kind, value=value)


def format_result(module: str, version: Optional[ModuleVersion]) -> str:
    """
    Render the single line of output for a lookup.
    """

    if version is None:
        return f"Module not found: {module}"
    return f"[{version.module}] Current {version.kind}: {version.value}"
