from __future__ import annotations

from codegenfix.oracle.dotnet import DotnetOracle
from codegenfix.rules.conversions import ArgumentCastRule, BoolReturnRule
from codegenfix.rules.integral_type import NativeIntegerRule
from codegenfix.rules.native_attributes import NativeTypeNameRule
from codegenfix.rules.operator_artifact import OperatorArtifactCompanionRule, OperatorArtifactRule
from codegenfix.rules.registry import RuleRegistry
from codegenfix.rules.undefined_name import ReallocRule
from codegenfix.rules.void_pointer import VtableCastRule


def build_rule_registry() -> RuleRegistry:
    """Register one rule per known diagnostic kind.

    To handle a new generator quirk:
    1. Map its compiler code to a ``DiagnosticKind`` in ``domain/models.py``
    2. Add a ``PatchRule`` in ``codegenfix/rules/``
    3. Register it here
    """
    return RuleRegistry(
        [
            NativeTypeNameRule(),
            NativeIntegerRule(),
            OperatorArtifactRule(),
            OperatorArtifactCompanionRule(),
            VtableCastRule(),
            BoolReturnRule(),
            ArgumentCastRule(),
            ReallocRule(),
        ]
    )


def build_oracle() -> DotnetOracle:
    return DotnetOracle()
