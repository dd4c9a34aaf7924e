"""The standard set of query validation rules."""

from __future__ import annotations

from .ast import QueryDocument, Schema
from .errors import GraphQLError
from .rules.documents import (
    known_directives,
    known_fragment_names,
    known_type_names,
    lone_anonymous_operation,
    no_fragment_cycles,
    no_undefined_variables,
    no_unused_fragments,
    no_unused_variables,
)
from .rules.fields import (
    fields_on_correct_type,
    fragments_on_composite_types,
    known_argument_names,
)
from .rules.overlapping import overlapping_fields_can_be_merged
from .rules.selections import (
    possible_fragment_spreads,
    provided_required_arguments,
    scalar_leafs,
    single_field_subscriptions,
)
from .rules.uniqueness import (
    unique_argument_names,
    unique_directives_per_location,
    unique_fragment_names,
    unique_input_field_names,
    unique_operation_names,
    unique_variable_names,
)
from .rules.values import (
    values_of_correct_type,
    variables_are_input_types,
    variables_in_allowed_position,
)
from .validator import Rule, validate

_STANDARD = (
    ("FieldsOnCorrectType", fields_on_correct_type),
    ("FragmentsOnCompositeTypes", fragments_on_composite_types),
    ("KnownArgumentNames", known_argument_names),
    ("KnownDirectives", known_directives),
    ("KnownFragmentNames", known_fragment_names),
    ("KnownTypeNames", known_type_names),
    ("LoneAnonymousOperation", lone_anonymous_operation),
    ("NoFragmentCycles", no_fragment_cycles),
    ("NoUndefinedVariables", no_undefined_variables),
    ("NoUnusedFragments", no_unused_fragments),
    ("NoUnusedVariables", no_unused_variables),
    ("OverlappingFieldsCanBeMerged", overlapping_fields_can_be_merged),
    ("PossibleFragmentSpreads", possible_fragment_spreads),
    ("ProvidedRequiredArguments", provided_required_arguments),
    ("ScalarLeafs", scalar_leafs),
    ("SingleFieldSubscriptions", single_field_subscriptions),
    ("UniqueArgumentNames", unique_argument_names),
    ("UniqueDirectivesPerLocation", unique_directives_per_location),
    ("UniqueFragmentNames", unique_fragment_names),
    ("UniqueInputFieldNames", unique_input_field_names),
    ("UniqueOperationNames", unique_operation_names),
    ("UniqueVariableNames", unique_variable_names),
    ("ValuesOfCorrectType", values_of_correct_type),
    ("VariablesAreInputTypes", variables_are_input_types),
    ("VariablesInAllowedPosition", variables_in_allowed_position),
)


def standard_rules() -> list[Rule]:
    """Every standard rule, in its fixed order."""
    return [Rule(name=name, func=func) for name, func in _STANDARD]


def validate_query(schema: Schema, document: QueryDocument) -> list[GraphQLError]:
    """Validate ``document`` against ``schema`` with the standard rules."""
    return validate(schema, document, standard_rules())