"""
Configuration model for ncaa-checkver.

The CLI resolves a Config instance once and passes it down into the
checker, so nothing below the CLI reads flags or the environment.

Each site setting is resolved in this order:
  - the value given on the command line,
  - the matching NCAA_BARCA_* environment variable, if non-empty,
  - the built-in default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

VERSION = "Barcelona-0.0.1"

DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class SiteOption:
    """Default, environment override and help text for one site setting."""

    default: str
    env_var: str
    usage: str


SITE_OPTIONS: Dict[str, SiteOption] = {
    "site-repo": SiteOption(
        default=str(Path.home() / "Repos" / "ncaa-barcelona"),
        env_var="NCAA_BARCA_SITE_REPO_PATH",
        usage="The path to your site (app) repo where the makefile resides.",
    ),
    "site-makefile": SiteOption(
        default="barcelona.make",
        env_var="NCAA_BARCA_SITE_MAKEFILE",
        usage="Filename of the *.make file to inspect.",
    ),
    "site-branch": SiteOption(
        default="master",
        env_var="NCAA_BARCA_SITE_BRANCH",
        usage="Branch of the site repo to check version in (dev|qa|master).",
    ),
}


@dataclass
class Config:
    """
    Top-level configuration for an ncaa-checkver run.

    module may be empty; the lookup then simply finds nothing.
    """

    repo_path: str = SITE_OPTIONS["site-repo"].default
    makefile: str = SITE_OPTIONS["site-makefile"].default
    branch: str = SITE_OPTIONS["site-branch"].default
    module: str = ""
    remote: str = DEFAULT_REMOTE
    verbosity: int = 0


def _resolve_option(
    name: str,
    flag_value: Optional[str],
    environ: Mapping[str, str],
) -> str:
    option = SITE_OPTIONS[name]
    if flag_value is not None:
        return flag_value

    env_value = environ.get(option.env_var)
    if env_value:
        return env_value

    return option.default


def resolve_config(
    site_repo: Optional[str] = None,
    site_makefile: Optional[str] = None,
    site_branch: Optional[str] = None,
    module: Optional[str] = None,
    remote: str = DEFAULT_REMOTE,
    verbosity: int = 0,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Build a Config from command-line values and the environment.

    A flag value of None means the flag was not given on the command
    line; only then is the environment consulted. environ defaults to
    os.environ.
    """

    if environ is None:
        environ = os.environ

    repo_path = _resolve_option("site-repo", site_repo, environ)

    return Config(
        repo_path=os.path.expanduser(repo_path),
        makefile=_resolve_option("site-makefile", site_makefile, environ),
        branch=_resolve_option("site-branch", site_branch, environ),
        module=module or "",
        remote=remote,
        verbosity=verbosity,
    )
