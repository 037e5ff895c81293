"""Built-in release policies.

- ``semver-default``: conservative view treating the API as both read and
  written by consumers.
- ``semver-read-only``: consumers only read values the API produces.
  Removals and narrowed types break them; additions do not.
- ``semver-write-only``: consumers only supply values the API accepts.
  Widened types and new required inputs break them; member removals do not.

Every built-in falls back to ``major`` for changes no rule covers.
"""

from __future__ import annotations

from apidiff.core.errors import PolicyError
from apidiff.diff.models import TAG_NOW_OPTIONAL, TAG_NOW_REQUIRED
from apidiff.policy.models import Policy
from apidiff.policy.rules import create_policy, rule

# ============================================================================
# semver-default
# ============================================================================

SEMVER_DEFAULT_POLICY: Policy = (
    create_policy("semver-default", "major")
    .describe("Conservative semantic versioning for APIs that are both read and written")
    .add_rules(
        rule("export-removal")
        .target("export")
        .action("removed")
        .rationale("Removing an export breaks consumers who depend on it")
        .returns("major"),
        rule("member-removal")
        .action("removed")
        .nested(True)
        .rationale("Removing a member breaks consumers who access it")
        .returns("major"),
        rule("rename")
        .action("renamed")
        .rationale("Renaming breaks consumers who reference by name")
        .returns("major"),
        rule("param-reorder")
        .target("parameter")
        .action("reordered")
        .rationale("Reordering parameters breaks positional callers")
        .returns("major"),
        rule("type-param-reorder")
        .target("type-parameter")
        .action("reordered")
        .rationale("Reordering type parameters breaks generic instantiation")
        .returns("major"),
        rule("required-param-addition")
        .target("parameter")
        .action("added")
        .has_tag(TAG_NOW_REQUIRED)
        .rationale("Adding required parameters breaks existing callers")
        .returns("major"),
        rule("required-property-addition")
        .target("property")
        .action("added")
        .has_tag(TAG_NOW_REQUIRED)
        .rationale("Adding required properties breaks existing implementers")
        .returns("major"),
        rule("type-narrowing")
        .aspect("type")
        .impact("narrowing")
        .rationale("Type narrowing may reject previously valid values")
        .returns("major"),
        rule("optionality-tightened")
        .aspect("optionality")
        .impact("narrowing")
        .rationale("Making something required breaks consumers who omit it")
        .returns("major"),
        rule("optionality-loosened")
        .aspect("optionality")
        .impact("widening")
        .rationale("Making something optional may return undefined unexpectedly")
        .returns("major"),
        rule("visibility-change")
        .aspect("visibility")
        .rationale("Visibility changes affect accessibility")
        .returns("major"),
        rule("readonly-removed")
        .aspect("readonly")
        .impact("widening")
        .rationale("Removing readonly allows mutation, changing semantics")
        .returns("major"),
        rule("constraint-change")
        .aspect("constraint")
        .rationale("Constraint changes affect type parameter requirements")
        .returns("major"),
        rule("enum-value-change")
        .aspect("enum-value")
        .rationale("Enum value changes may break switch statements")
        .returns("major"),
        rule("export-addition")
        .target("export")
        .action("added")
        .rationale("Adding exports is backward compatible")
        .returns("minor"),
        rule("optional-addition")
        .action("added")
        .has_tag(TAG_NOW_OPTIONAL)
        .rationale("Optional additions are backward compatible")
        .returns("minor"),
        rule("member-addition")
        .action("added")
        .nested(True)
        .not_tag(TAG_NOW_REQUIRED)
        .rationale("Adding members is generally backward compatible")
        .returns("minor"),
        rule("type-widening")
        .aspect("type")
        .impact("widening")
        .rationale("Type widening accepts more values, backward compatible")
        .returns("minor"),
        rule("readonly-added")
        .aspect("readonly")
        .impact("narrowing")
        .rationale("Adding readonly is backward compatible for consumers")
        .returns("minor"),
        rule("undeprecation")
        .aspect("deprecation")
        .impact("narrowing")
        .rationale("Removing deprecation notices is backward compatible")
        .returns("minor"),
        rule("default-type-change")
        .aspect("default-type")
        .rationale("Default type parameter changes are usually compatible")
        .returns("minor"),
        rule("deprecation")
        .aspect("deprecation")
        .impact("widening")
        .rationale("Adding deprecation is informational, no behavior change")
        .returns("patch"),
        rule("type-equivalent")
        .aspect("type")
        .impact("equivalent")
        .rationale("Semantically equivalent types require no version bump")
        .returns("none"),
    )
    .build()
)

# ============================================================================
# semver-read-only (consumer / covariant)
# ============================================================================

SEMVER_READ_ONLY_POLICY: Policy = (
    create_policy("semver-read-only", "major")
    .describe("Semantic versioning for APIs whose consumers only read values")
    .add_rules(
        rule("removal").action("removed").rationale("Readers expect data to be present").returns("major"),
        rule("rename").action("renamed").rationale("Readers reference by name").returns("major"),
        rule("param-reorder")
        .target("parameter")
        .action("reordered")
        .rationale("Positional access is affected")
        .returns("major"),
        rule("type-param-reorder")
        .target("type-parameter")
        .action("reordered")
        .rationale("Reordering type parameters breaks generic instantiation")
        .returns("major"),
        rule("type-narrowing")
        .aspect("type")
        .impact("narrowing")
        .rationale("Readers may not handle the narrower type")
        .returns("major"),
        rule("optionality-loosened")
        .aspect("optionality")
        .impact("widening")
        .rationale("Readers might receive undefined unexpectedly")
        .returns("major"),
        rule("addition").action("added").rationale("Readers receive additional data").returns("minor"),
        rule("type-widening")
        .aspect("type")
        .impact("widening")
        .rationale("Readers can handle broader types")
        .returns("minor"),
        rule("optionality-tightened")
        .aspect("optionality")
        .impact("narrowing")
        .rationale("Readers always receive a value")
        .returns("minor"),
        rule("undeprecation").aspect("deprecation").impact("narrowing").returns("minor"),
        rule("deprecation").aspect("deprecation").impact("widening").returns("patch"),
        rule("type-equivalent").aspect("type").impact("equivalent").returns("none"),
    )
    .build()
)

# ============================================================================
# semver-write-only (producer / contravariant)
# ============================================================================

SEMVER_WRITE_ONLY_POLICY: Policy = (
    create_policy("semver-write-only", "major")
    .describe("Semantic versioning for APIs whose consumers only supply values")
    .add_rules(
        rule("export-removal")
        .target("export")
        .action("removed")
        .rationale("Cannot use removed exports")
        .returns("major"),
        rule("enum-member-removal")
        .target("enum-member")
        .action("removed")
        .rationale("Cannot use removed enum value")
        .returns("major"),
        rule("member-removal")
        .action("removed")
        .nested(True)
        .rationale("Writers no longer need to provide the value")
        .returns("minor"),
        rule("rename").action("renamed").rationale("Writers reference by name").returns("major"),
        rule("param-reorder")
        .target("parameter")
        .action("reordered")
        .rationale("Positional arguments affected")
        .returns("major"),
        rule("type-param-reorder")
        .target("type-parameter")
        .action("reordered")
        .rationale("Reordering type parameters breaks generic instantiation")
        .returns("major"),
        rule("required-addition")
        .action("added")
        .has_tag(TAG_NOW_REQUIRED)
        .rationale("Writers must provide the new required value")
        .returns("major"),
        rule("type-widening")
        .aspect("type")
        .impact("widening")
        .rationale("Writers must handle broader type requirements")
        .returns("major"),
        rule("optionality-tightened")
        .aspect("optionality")
        .impact("narrowing")
        .rationale("Writers must now provide the value")
        .returns("major"),
        rule("optional-addition")
        .action("added")
        .has_tag(TAG_NOW_OPTIONAL)
        .rationale("Writers can optionally provide the value")
        .returns("minor"),
        rule("export-addition")
        .target("export")
        .action("added")
        .rationale("New exports are available to use")
        .returns("minor"),
        rule("type-narrowing")
        .aspect("type")
        .impact("narrowing")
        .rationale("Stricter requirements, existing valid values still work")
        .returns("minor"),
        rule("optionality-loosened")
        .aspect("optionality")
        .impact("widening")
        .rationale("Writers can now omit the value")
        .returns("minor"),
        rule("undeprecation").aspect("deprecation").impact("narrowing").returns("minor"),
        rule("deprecation").aspect("deprecation").impact("widening").returns("patch"),
        rule("type-equivalent").aspect("type").impact("equivalent").returns("none"),
    )
    .build()
)

BUILTIN_POLICIES: dict[str, Policy] = {
    p.name: p for p in (SEMVER_DEFAULT_POLICY, SEMVER_READ_ONLY_POLICY, SEMVER_WRITE_ONLY_POLICY)
}


def get_builtin_policy(name: str) -> Policy:
    """Look up a built-in policy by name.

    Raises:
        PolicyError: no built-in policy has this name.
    """
    try:
        return BUILTIN_POLICIES[name]
    except KeyError:
        raise PolicyError.unknown_policy(name, sorted(BUILTIN_POLICIES)) from None
