"""
Interplay Report Prompts

Builds the user prompts for the SEM, SEO and Director reasoning stages from
the resolved skill definitions, applying the token budget rules in
src.prompts.serialization. Each builder returns a PromptBuildResult carrying
the render mode and budget so the orchestrator can record truncation.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from src.agents.interplay.models import ClientContext, EnrichedKeyword, EnrichedPage
from src.agents.interplay.schemas import SEMAction, SEOAction
from src.agents.skills.skill_base import (
    DirectorSkillDefinition,
    SEMSkillDefinition,
    SEOSkillDefinition,
)
from src.prompts.serialization import (
    TOKEN_LIMITS,
    SerializationMode,
    TokenBudget,
    calculate_keyword_priority,
    calculate_page_priority,
    determine_serialization_mode,
    format_benchmarks,
    format_benchmarks_compact,
    format_conflict_rules,
    format_constraints,
    format_content_patterns,
    format_content_patterns_compact,
    format_kpis,
    format_kpis_compact,
    format_patterns,
    format_patterns_compact,
    format_prioritization_rules,
    format_schema_rules,
    format_sem_examples,
    format_sem_examples_compact,
    format_seo_examples,
    format_seo_examples_compact,
    format_synergy_rules,
    prioritize_and_truncate,
    validate_prompt_size,
)

# Page previews are cut further inside the data payload
PAYLOAD_PREVIEW_CHARS = 200


# ============================================================================
# SYSTEM MESSAGES
# ============================================================================

SEM_SYSTEM_PROMPT = (
    "You are a senior paid search (SEM) strategist. "
    "You analyse keyword performance data and return recommendations as a single JSON object. "
    "Never wrap the JSON in prose."
)

SEO_SYSTEM_PROMPT = (
    "You are a senior SEO strategist who uses paid search data to accelerate organic growth. "
    "You analyse landing pages and return recommendations as a single JSON object. "
    "Never wrap the JSON in prose."
)

DIRECTOR_SYSTEM_PROMPT = (
    "You are a digital marketing director who turns specialist SEM and SEO findings into "
    "an executive report. Return a single JSON object and nothing else."
)


# ============================================================================
# OUTPUT CONTRACTS
# ============================================================================

SEM_OUTPUT_FORMAT = """{
  "semActions": [
    {
      "action": "string",
      "level": "campaign" | "ad_group" | "keyword",
      "expectedUplift": "string",
      "reasoning": "string",
      "impact": "high" | "medium" | "low",
      "keyword": "optional keyword this applies to"
    }
  ]
}"""

SEO_OUTPUT_FORMAT = """{
  "seoActions": [
    {
      "condition": "string describing the problem",
      "recommendation": "string describing the strategy",
      "specificActions": ["action 1", "action 2", "action 3"],
      "impact": "high" | "medium" | "low",
      "url": "optional url"
    }
  ]
}"""


@dataclass(frozen=True)
class PromptBuildResult:
    prompt: str
    mode: SerializationMode
    budget: Optional[TokenBudget] = None
    estimated_tokens: int = 0

    @property
    def items_dropped(self) -> int:
        if self.budget is None:
            return 0
        return self.budget.keywords_dropped + self.budget.pages_dropped


def _truncation_notice(dropped: int, noun: str) -> str:
    if dropped <= 0:
        return ""
    return (
        f"\n\nNOTE: Data was truncated for token limits. {dropped} lower-priority {noun} omitted. "
        f"Focus analysis on the provided high-priority items.\n"
    )


def _context_lines(context: ClientContext, include_market: bool = True) -> str:
    lines = []
    if context.industry:
        lines.append(f"Industry: {context.industry}")
    if include_market and context.target_market:
        lines.append(f"Target Market: {context.target_market}")
    return "\n".join(lines)


def _bullets(items: Sequence[str], empty: str = "None specified") -> str:
    return "\n".join(f"- {item}" for item in items) if items else empty


# ============================================================================
# SEM PROMPT
# ============================================================================

def serialize_keyword(keyword: EnrichedKeyword) -> Dict[str, Any]:
    """Keyword fields exposed to the SEM stage."""
    data: Dict[str, Any] = {
        "query": keyword.query,
        "priority": keyword.priority.value,
        "reason": keyword.reason,
        "spend": keyword.spend,
        "conversions": keyword.conversions,
        "roas": keyword.roas,
        "organicPosition": keyword.organic_position,
    }
    metrics = keyword.competitive_metrics
    if metrics is not None:
        data["competitiveMetrics"] = {
            "impressionShare": metrics.impression_share,
            "lostImpressionShareRank": metrics.lost_impression_share_rank,
            "lostImpressionShareBudget": metrics.lost_impression_share_budget,
            "topOfPageRate": metrics.top_of_page_rate,
            "absTopOfPageRate": metrics.abs_top_of_page_rate,
            "dataLevel": metrics.data_level.value,
        }
    return data


def build_sem_prompt(
    keywords: Sequence[EnrichedKeyword],
    skill: SEMSkillDefinition,
    context: Optional[ClientContext] = None,
) -> PromptBuildResult:
    """Build the SEM prompt, truncating keywords to the mode's cap."""
    context = context or ClientContext()
    mode, budget = determine_serialization_mode(keywords, [])
    included, dropped = prioritize_and_truncate(keywords, budget.keywords_included, calculate_keyword_priority)

    keywords_json = json.dumps([serialize_keyword(k) for k in included], indent=2)
    notice = _truncation_notice(dropped, "keywords")

    if mode is SerializationMode.COMPACT:
        prompt = _compact_sem_prompt(keywords_json, skill, notice, context)
    else:
        prompt = _full_sem_prompt(keywords_json, skill, notice, context)

    estimated = validate_prompt_size(prompt, "SEM")
    return PromptBuildResult(prompt=prompt, mode=mode, budget=budget, estimated_tokens=estimated)


def _full_sem_prompt(keywords_json: str, skill: SEMSkillDefinition, notice: str, context: ClientContext) -> str:
    kpis = format_kpis(skill.kpis)
    return f"""{skill.prompt.role_context}

## Business Context
{skill.context.business_model}

Conversion Definition: {skill.context.conversion_definition}
Customer Journey: {skill.context.typical_customer_journey}
{_context_lines(context)}

## Key Performance Indicators

### Primary KPIs (Focus Here)
{kpis["primary"]}

### Secondary KPIs
{kpis["secondary"]}

### Metrics to IGNORE (Not Applicable)
{kpis["irrelevant"]}

## Benchmarks for This Business Type
{format_benchmarks(skill.benchmarks)}

## Analysis Guidance
{skill.prompt.analysis_instructions}

## Patterns to Look For
{format_patterns(skill.analysis.key_patterns)}

## Anti-Patterns (Problems to Flag)
{format_patterns(skill.analysis.anti_patterns)}
{notice}
## Data to Analyze
```json
{keywords_json}
```

## Output Requirements
{skill.prompt.output_guidance}

## Examples
{format_sem_examples(skill.prompt.examples)}

## CRITICAL CONSTRAINTS
{format_constraints(skill.prompt.constraints)}

## Output Format
IMPORTANT: Return ONLY valid JSON without markdown code blocks.

{SEM_OUTPUT_FORMAT}"""


def _compact_sem_prompt(keywords_json: str, skill: SEMSkillDefinition, notice: str, context: ClientContext) -> str:
    kpis = format_kpis_compact(skill.kpis)
    return f"""{skill.prompt.role_context}

## Business Context
{skill.context.business_model}
{_context_lines(context, include_market=False)}

## Primary KPIs
{kpis["primary"]}

## Metrics to IGNORE
{kpis["irrelevant"]}

## Benchmarks
{format_benchmarks_compact(skill.benchmarks)}

## Key Patterns
{format_patterns_compact(skill.analysis.key_patterns)}
{notice}
## Data
```json
{keywords_json}
```

## Output
{skill.prompt.output_guidance}

{format_sem_examples_compact(skill.prompt.examples)}

## CONSTRAINTS
{format_constraints(skill.prompt.constraints)}

## Output Format
Return ONLY valid JSON:

{SEM_OUTPUT_FORMAT}"""


# ============================================================================
# SEO PROMPT
# ============================================================================

def serialize_page(page: EnrichedPage) -> Dict[str, Any]:
    """Page fields exposed to the SEO stage."""
    data: Dict[str, Any] = {
        "url": page.url,
        "priority": page.priority.value,
        "reason": page.reason,
        "paidSpend": page.paid_spend,
        "organicPosition": page.page.organic_position,
        "bounceRate": page.page.bounce_rate,
        "impressions": page.impressions,
        "ctr": page.page.ctr,
    }
    content = page.content
    if content is not None:
        title = content.title[:TOKEN_LIMITS.MAX_PAGE_TITLE_CHARS] if content.title else content.title
        data["content"] = {
            "wordCount": content.word_count,
            "title": title,
            "h1": content.h1,
            "metaDescription": content.meta_description,
            "contentPreview": content.content_preview[:PAYLOAD_PREVIEW_CHARS],
            "pageType": content.page_type,
            "detectedSchema": list(content.schema_types),
            "schemaErrors": list(content.schema_errors),
            "contentSignals": dict(content.content_signals),
        }
    return data


def build_seo_prompt(
    pages: Sequence[EnrichedPage],
    skill: SEOSkillDefinition,
    context: Optional[ClientContext] = None,
) -> PromptBuildResult:
    """Build the SEO prompt, truncating pages to the mode's cap."""
    context = context or ClientContext()
    mode, budget = determine_serialization_mode([], pages)
    included, dropped = prioritize_and_truncate(pages, budget.pages_included, calculate_page_priority)

    pages_json = json.dumps([serialize_page(p) for p in included], indent=2)
    notice = _truncation_notice(dropped, "pages")

    if mode is SerializationMode.COMPACT:
        prompt = _compact_seo_prompt(pages_json, skill, notice, context)
    else:
        prompt = _full_seo_prompt(pages_json, skill, notice, context)

    estimated = validate_prompt_size(prompt, "SEO")
    return PromptBuildResult(prompt=prompt, mode=mode, budget=budget, estimated_tokens=estimated)


def _full_seo_prompt(pages_json: str, skill: SEOSkillDefinition, notice: str, context: ClientContext) -> str:
    kpis = format_kpis(skill.kpis)
    issues = skill.common_issues
    critical = "\n".join(f"- **{i.id}**: {i.description}" for i in issues.critical) or "None defined"
    warnings = "\n".join(f"- **{i.id}**: {i.description}" for i in issues.warnings) or "None defined"

    return f"""{skill.prompt.role_context}

## Business Context
Site Type: {skill.context.site_type}
Primary Goal: {skill.context.primary_goal}
Content Strategy: {skill.context.content_strategy}
{_context_lines(context)}

## Key Performance Indicators

### Primary KPIs (Focus Here)
{kpis["primary"]}

### Secondary KPIs
{kpis["secondary"]}

### Metrics to IGNORE (Not Applicable)
{kpis["irrelevant"]}

## Benchmarks for This Business Type
{format_benchmarks(skill.benchmarks)}

## Schema Markup Requirements
{format_schema_rules(skill.schema)}

## Content Patterns to Look For
{format_content_patterns(skill.analysis.content_patterns)}

## Analysis Guidance
{skill.prompt.analysis_instructions}

## Common Issues for This Business Type

### Critical Issues (Always Flag)
{critical}

### Warnings (Flag if Severe)
{warnings}

### False Positives (IGNORE These)
{_bullets(issues.false_positives, empty="None")}
{notice}
## Pages to Analyze
```json
{pages_json}
```

## Output Requirements
{skill.prompt.output_guidance}

## Examples
{format_seo_examples(skill.prompt.examples)}

## CRITICAL CONSTRAINTS
{format_constraints(skill.prompt.constraints)}

## Output Format
IMPORTANT: Return ONLY valid JSON without markdown code blocks.

{SEO_OUTPUT_FORMAT}"""


def _compact_seo_prompt(pages_json: str, skill: SEOSkillDefinition, notice: str, context: ClientContext) -> str:
    kpis = format_kpis_compact(skill.kpis)
    return f"""{skill.prompt.role_context}

## Business Context
Site Type: {skill.context.site_type}
Primary Goal: {skill.context.primary_goal}
{_context_lines(context, include_market=False)}

## Primary KPIs
{kpis["primary"]}

## Metrics to IGNORE
{kpis["irrelevant"]}

## Benchmarks
{format_benchmarks_compact(skill.benchmarks)}

## Content Patterns
{format_content_patterns_compact(skill.analysis.content_patterns)}
{notice}
## Pages
```json
{pages_json}
```

## Output
{skill.prompt.output_guidance}

{format_seo_examples_compact(skill.prompt.examples)}

## CONSTRAINTS
{format_constraints(skill.prompt.constraints)}

## Output Format
Return ONLY valid JSON:

{SEO_OUTPUT_FORMAT}"""


# ============================================================================
# DIRECTOR PROMPT
# ============================================================================

def build_director_prompt(
    sem_actions: Sequence[SEMAction],
    seo_actions: Sequence[SEOAction],
    skill: DirectorSkillDefinition,
    context: Optional[ClientContext] = None,
) -> PromptBuildResult:
    """Build the Director prompt from the (already constraint-filtered) specialist actions."""
    context = context or ClientContext()
    input_data = json.dumps(
        {
            "semAnalysis": {"semActions": [a.to_dict() for a in sem_actions]},
            "seoAnalysis": {"seoActions": [a.to_dict() for a in seo_actions]},
        },
        indent=2,
    )

    prompt = _director_prompt(input_data, skill, context)
    estimated = validate_prompt_size(prompt, "Director")
    return PromptBuildResult(prompt=prompt, mode=SerializationMode.FULL, estimated_tokens=estimated)


def _percent(weight: float) -> str:
    return f"{round(weight * 100)}%"


def _director_prompt(input_data: str, skill: DirectorSkillDefinition, context: ClientContext) -> str:
    filtering = skill.filtering
    weights = filtering.impact_weights
    labels = skill.output.category_labels
    priorities: List[str] = [f"{i}. {p}" for i, p in enumerate(skill.context.business_priorities, start=1)]

    return f"""{skill.prompt.role_context}

## Business Context
{skill.context.executive_framing}
{_context_lines(context)}

### Business Priorities (in order)
{chr(10).join(priorities)}

### Success Metrics
{_bullets(skill.context.success_metrics)}

## Specialist Outputs
You have received tactical recommendations from your SEM and SEO specialists:

{input_data}

## Synthesis Rules

### Conflict Resolution
When SEM and SEO recommendations conflict, apply these rules:
{format_conflict_rules(skill.synthesis.conflict_resolution)}

### Synergy Identification
Look for opportunities to combine recommendations:
{format_synergy_rules(skill.synthesis.synergy_identification)}

### Prioritization Rules
Adjust recommendation priority based on:
{format_prioritization_rules(skill.synthesis.prioritization)}

## Your Mandate

### 1. Synthesize & Prioritize
{skill.prompt.synthesis_instructions}

### 2. Curation & Filtering
Apply the following logic:

**Impact Weights:**
- Revenue Impact: {_percent(weights.revenue)}
- Cost Savings: {_percent(weights.cost)}
- Implementation Effort: {_percent(weights.effort)}
- Risk: {_percent(weights.risk)}

**Filtering Rules:**
- Maximum recommendations: {filtering.max_recommendations}
- Minimum impact threshold: {filtering.min_impact_threshold}

**Must Include (if present):**
{_bullets(filtering.must_include)}

**Must Exclude:**
{_bullets(filtering.must_exclude)}

### 3. Executive Summary
{skill.executive_summary.framing_guidance}

**Focus Areas to Address:**
{_bullets(skill.executive_summary.focus_areas)}

**Metrics to Quantify:**
{_bullets(skill.executive_summary.metrics_to_quantify)}

**Maximum Highlights:** {skill.executive_summary.max_highlights}

### 4. Prioritization Guidance
{skill.prompt.prioritization_guidance}

## Output Format
{skill.prompt.output_format}

## CRITICAL CONSTRAINTS
{format_constraints(skill.prompt.constraints)}

## Output Requirements
IMPORTANT: Return ONLY valid JSON without markdown code blocks.

{{
  "executiveSummary": {{
    "summary": "3-5 sentence executive overview",
    "keyHighlights": ["highlight 1", "highlight 2", "highlight 3"]
  }},
  "unifiedRecommendations": [
    {{
      "title": "Short actionable title (max 100 chars)",
      "description": "2-3 sentence explanation of the recommendation",
      "type": "sem" | "seo" | "hybrid",
      "impact": "high" | "medium" | "low",
      "effort": "high" | "medium" | "low",
      "actionItems": ["specific action 1", "specific action 2"]
    }}
  ]
}}

Type labels: "sem" = {labels.sem}, "seo" = {labels.seo}, "hybrid" = {labels.hybrid}.

Remember:
- Maximum {filtering.max_recommendations} recommendations
- At most {skill.output.recommendation_format.max_action_items} action items per recommendation
- Prioritize by business impact
- Be specific and actionable
- Combine related recommendations when possible"""
