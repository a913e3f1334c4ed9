"""Invocation planning for reconciliation actions.

Maps each action to the Cargo command line that carries it out. This is
a pure function of the action; running the command is left to
:mod:`crateback.operators.cargo`.
"""

from crateback.models.action import Action, ActionType, Invocation
from crateback.models.package import (
    DEFAULT_PROFILE,
    GitSource,
    PackageRecord,
    PathSource,
    RegistrySource,
)

CARGO = "cargo"


def source_args(record: PackageRecord) -> list[str]:
    """Build the source-selecting part of ``cargo install``.

    Args:
        record: Package to install.

    Returns:
        Arguments naming the crate and where to fetch it from.
    """
    match record.source:
        case RegistrySource(version_req=version_req, index=index):
            args = [record.name]
            requirement = version_req or (f"={record.version}" if record.version else None)
            if requirement:
                args += ["--version", requirement]
            if index:
                args += ["--index", index]
            return args
        case PathSource(directory=directory):
            return ["--path", directory]
        case GitSource(url=url, ref=ref, ref_kind=ref_kind):
            args = ["--git", url]
            if ref:
                args += [f"--{ref_kind}", ref]
            # Name selects the crate in multi-crate repositories
            args.append(record.name)
            return args
    msg = f"Unsupported source for {record.name}: {record.source!r}"
    raise ValueError(msg)


def build_args(record: PackageRecord) -> list[str]:
    """Build the build-configuration flags of ``cargo install``."""
    args: list[str] = []
    if record.profile != DEFAULT_PROFILE:
        args += ["--profile", record.profile]
    if record.target:
        args += ["--target", record.target]
    if record.features:
        args += ["--features", ",".join(sorted(record.features))]
    if record.all_features:
        args.append("--all-features")
    if record.no_default_features:
        args.append("--no-default-features")
    return args


def plan_invocation(action: Action) -> Invocation:
    """Select the Cargo invocation for an action.

    INSTALL and UPDATE install the backup record; ``--force`` is added
    whenever a registration already exists (updates and reinstalls of
    packages with missing binaries). REMOVE uninstalls by name.

    Args:
        action: Action from an ActionPlan.

    Returns:
        Invocation describing the command line.

    Raises:
        ValueError: For NOOP actions, which have nothing to run.
    """
    if action.action_type == ActionType.REMOVE:
        return Invocation(program=CARGO, args=("uninstall", action.name))

    if action.action_type == ActionType.NOOP or action.record is None:
        msg = f"No invocation for {action.action_type.value} action on {action.name}"
        raise ValueError(msg)

    args = ["install", *source_args(action.record), *build_args(action.record)]
    if action.current is not None:
        args.append("--force")
    return Invocation(program=CARGO, args=tuple(args))
