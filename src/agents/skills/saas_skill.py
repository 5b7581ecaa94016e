"""
SaaS Skill Bundle

Subscription software: trials, demos and customer acquisition cost. Average
order value, Product schema and location targeting never apply.
"""

from src.agents.skills.skill_base import (
    AgentOutputConfig,
    AgentPromptConfig,
    AgentSkillBundle,
    AnalysisPattern,
    BusinessType,
    CommonIssue,
    CommonIssues,
    CompetitiveMetricsConfig,
    ConflictRule,
    ContentPattern,
    ContentSignal,
    DataQualityConfig,
    DirectorContext,
    DirectorPromptConfig,
    DirectorSkillDefinition,
    ExecutiveSummaryConfig,
    FilteringConfig,
    ImpactWeights,
    KeywordEnrichmentConfig,
    KPIConfig,
    KPIDefinition,
    OnPageFactor,
    Opportunity,
    PageClassificationConfig,
    PageClassificationPattern,
    PageEnrichmentConfig,
    PageTypeSchemaRule,
    PrioritizationRule,
    PriorityBoost,
    PriorityRule,
    RecommendationTypes,
    ResearcherSkillDefinition,
    RulePriority,
    SchemaExtractionConfig,
    SchemaRule,
    ScoutLimits,
    ScoutMetricsConfig,
    ScoutPriorityRules,
    ScoutSkillDefinition,
    ScoutThresholds,
    SEMAnalysisConfig,
    SEMContext,
    SEMExample,
    SEMSkillDefinition,
    SEOAnalysisConfig,
    SEOContext,
    SEOExample,
    SEOSchemaConfig,
    SEOSkillDefinition,
    SynergyRule,
    SynthesisConfig,
    TechnicalCheck,
    ThresholdSet,
    when,
)

VERSION = "1.0.0"


SAAS_SCOUT_SKILL = ScoutSkillDefinition(
    version=VERSION,
    # Subscription LTV justifies higher acquisition costs
    thresholds=ScoutThresholds(
        high_spend_threshold=500,
        low_roas_threshold=0,
        cannibalization_position=5,
        high_bounce_rate_threshold=0.60,
        low_ctr_threshold=0.025,
        min_impressions_for_analysis=75,
    ),
    priority_rules=ScoutPriorityRules(
        battleground_keywords=(
            PriorityRule(
                id="high-cac-keywords",
                name="High CAC Keywords",
                description="Keywords where customer acquisition cost exceeds target",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("cost_per_conversion", ">", 250),
                    when("conversions", ">", 2),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="high-spend-low-trials",
                name="High Spend, Low Trials",
                description="Keywords with significant spend but few trial signups",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("spend", ">", threshold="high_spend_threshold"),
                    when("conversions", "<", 3),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="cannibalization-risk",
                name="Paid/Organic Cannibalization",
                description="Paying for clicks on keywords where organic ranks well",
                priority=RulePriority.HIGH,
                conditions=(
                    when("organic_position", "<=", threshold="cannibalization_position"),
                    when("spend", ">", 150),
                ),
            ),
            PriorityRule(
                id="high-intent-opportunity",
                name="High Intent Opportunity",
                description="Converting keywords with room to scale",
                priority=RulePriority.MEDIUM,
                conditions=(when("conversions", ">", 5),),
                reason="growth_potential",
            ),
            PriorityRule(
                id="competitor-pressure",
                name="Contested Spend",
                description="Spend high enough to warrant competitive analysis",
                priority=RulePriority.LOW,
                conditions=(when("spend", ">", threshold="high_spend_threshold", multiplier=0.5),),
                reason="competitive_pressure",
            ),
        ),
        critical_pages=(
            PriorityRule(
                id="high-spend-feature-page",
                name="High Spend Feature Page",
                description="Pages receiving significant paid traffic without organic rank",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("paid_spend", ">", 300),
                    when("organic_position", ">", 10),
                ),
                reason="high_spend_low_organic",
            ),
            PriorityRule(
                id="high-bounce-landing",
                name="High Bounce Landing Page",
                description="Landing pages with excessive bounce rates",
                priority=RulePriority.HIGH,
                conditions=(
                    when("bounce_rate", ">", threshold="high_bounce_rate_threshold"),
                    when("sessions", ">", 100),
                ),
                reason="high_traffic_high_bounce",
            ),
            PriorityRule(
                id="integration-page-opportunity",
                name="Low CTR Page Opportunity",
                description="Pages with impressions that could capture more traffic",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("impressions", ">", 500),
                    when("ctr", "<", threshold="low_ctr_threshold"),
                ),
                reason="high_impressions_low_ctr",
            ),
        ),
    ),
    metrics=ScoutMetricsConfig(
        include=("spend", "conversions", "cac", "ctr", "cpc", "impressions", "position", "bounceRate"),
        exclude=("aov", "transactionValue"),
        primary=("conversions", "cac", "conversionRate"),
    ),
    limits=ScoutLimits(max_battleground_keywords=25, max_critical_pages=15),
)


SAAS_RESEARCHER_SKILL = ResearcherSkillDefinition(
    version=VERSION,
    keyword_enrichment=KeywordEnrichmentConfig(
        competitive_metrics=CompetitiveMetricsConfig(
            required=("impressionShare", "lostImpressionShareRank", "lostImpressionShareBudget"),
            optional=("topOfPageRate", "outrankingShare", "overlapRate"),
        ),
        priority_boosts=(
            PriorityBoost.from_condition("impressionShare", "< 35", 2, "Converting keyword with visibility headroom"),
            PriorityBoost.from_condition("lostImpressionShareBudget", "> 30", 1.6, "Efficient keyword limited by budget"),
            PriorityBoost.from_condition("conversions", "> 3", 1.4, "Keyword already producing trials"),
        ),
    ),
    page_enrichment=PageEnrichmentConfig(
        schema_extraction=SchemaExtractionConfig(
            look_for=(
                "SoftwareApplication", "WebApplication", "Organization", "FAQPage",
                "HowTo", "VideoObject", "Review", "AggregateRating",
            ),
            flag_if_present=("Product", "Offer", "LocalBusiness"),
            flag_if_missing=("SoftwareApplication", "Organization"),
        ),
        content_signals=(
            ContentSignal("trial-cta", "Free Trial CTA",
                          '[class*="trial"], [data-action*="trial"], .start-trial, .free-trial',
                          "critical", "Free trial call to action"),
            ContentSignal("demo-cta", "Demo Request CTA",
                          '[class*="demo"], .request-demo, .book-demo, .schedule-demo',
                          "critical", "Demo request call to action"),
            ContentSignal("pricing-display", "Pricing Display",
                          '[class*="pricing"], .price, .plan, [data-plan]',
                          "high", "Plan and pricing information"),
            ContentSignal("feature-comparison", "Competitor Comparison",
                          '[class*="comparison"], [class*="compare"], .vs, .alternative',
                          "high", "Comparison against alternatives"),
            ContentSignal("integration-logos", "Integrations",
                          '[class*="integration"], [class*="partner"], .apps, .connect',
                          "medium", "Integration ecosystem display"),
            ContentSignal("security-badges", "Security Badges",
                          '[class*="security"], [class*="compliance"], .soc2, .gdpr, .hipaa',
                          "high", "Compliance and security signals",
                          business_context="Enterprise buyers screen vendors on compliance"),
            ContentSignal("customer-logos", "Customer Logos",
                          '[class*="customer"], [class*="client"], .trusted-by, .used-by',
                          "medium", "Social proof through customer logos"),
        ),
        page_classification=PageClassificationConfig(
            patterns=(
                PageClassificationPattern(r"/pricing|/plans|/packages", "pricing", "Pricing page", 0.95),
                PageClassificationPattern(r"/features/|/product/|/platform/", "feature", "Feature overview page", 0.9),
                PageClassificationPattern(r"/feature/[^/]+/?$", "feature-detail", "Individual feature page", 0.85),
                PageClassificationPattern(r"/integrations/|/apps/|/marketplace/", "integrations", "Integration directory", 0.9),
                PageClassificationPattern(r"/integration/[^/]+|/connect/[^/]+", "integration-detail", "Integration page", 0.85),
                PageClassificationPattern(r"/compare/|/vs/|/alternative", "comparison", "Comparison page", 0.9),
                PageClassificationPattern(r"/customers/|/case-studies/|/success-stories/", "case-studies", "Case studies", 0.85),
                PageClassificationPattern(r"/docs/|/help/|/support/|/knowledge-base/", "documentation", "Documentation", 0.9),
                PageClassificationPattern(r"/demo|/request-demo|/book-demo", "demo", "Demo request page", 0.95),
                PageClassificationPattern(r"/trial|/signup|/get-started|/start", "trial", "Trial signup page", 0.9),
                PageClassificationPattern(r"/blog/|/resources/|/articles/", "content", "Content page", 0.8),
            ),
            default_type="landing",
            confidence_threshold=0.7,
        ),
    ),
    data_quality=DataQualityConfig(
        min_keywords_with_competitive_data=10,
        min_pages_with_content=5,
        max_fetch_timeout_ms=15000,
        max_concurrent_fetches=5,
    ),
)


SAAS_SEM_SKILL = SEMSkillDefinition(
    version=VERSION,
    context=SEMContext(
        business_model=(
            "Subscription software business acquiring customers through free trials and demo "
            "requests. Lifetime value justifies higher acquisition costs; trial quality matters "
            "as much as trial volume."
        ),
        conversion_definition="A conversion is a trial signup or a demo request.",
        typical_customer_journey=(
            "Problem awareness -> Category research -> Vendor comparison -> Trial or demo -> "
            "Activation -> Paid conversion"
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("cac", "critical", "Customer acquisition cost", "lower",
                          "Must stay well below customer lifetime value.", benchmark=250),
            KPIDefinition("conversions", "critical", "Trial signups and demo requests", "higher",
                          "Pipeline volume metric."),
            KPIDefinition("conversionRate", "critical", "Clicks that become trials or demos", "higher",
                          "Landing page and message fit indicator.", benchmark=0.04),
        ),
        secondary=(
            KPIDefinition("ctr", "medium", "Click-through rate", "higher",
                          "Ad relevance for targeted software queries.", benchmark=0.035),
            KPIDefinition("impressionShare", "medium", "Share of eligible impressions", "higher",
                          "Visibility on category and competitor terms."),
        ),
        irrelevant=("aov", "transactionValue", "conversionValue", "storeVisits"),
    ),
    benchmarks={
        "ctr": ThresholdSet(0.05, 0.035, 0.025, 0.015),
        "conversionRate": ThresholdSet(0.06, 0.04, 0.025, 0.01),
        "cpc": ThresholdSet(3.0, 6.0, 10.0, 18.0),
        "costPerConversion": ThresholdSet(100, 200, 350, 600),
    },
    analysis=SEMAnalysisConfig(
        key_patterns=(
            AnalysisPattern("competitor-term-efficiency", "Competitor Term Efficiency",
                            "Competitor alternative keywords converting at healthy CAC",
                            ("'alternative' and 'vs' queries converting", "CAC near target"),
                            "Expand competitor comparison campaigns with dedicated landing pages"),
            AnalysisPattern("feature-query-strength", "Feature Query Strength",
                            "Feature-specific queries outperforming generic category terms",
                            ("Higher trial rate on feature terms",),
                            "Build ad groups per core feature"),
        ),
        anti_patterns=(
            AnalysisPattern("generic-category-waste", "Generic Category Waste",
                            "Broad category terms capturing students, job seekers and free-tool seekers",
                            ("'free', 'jobs', 'tutorial' search terms", "High CAC on broad terms"),
                            "Add negative keywords and tighten match types"),
            AnalysisPattern("trial-quality-gap", "Trial Quality Gap",
                            "Cheap trials that never activate",
                            ("Low CAC with poor activation",),
                            "Optimize toward activated trials rather than raw signups"),
        ),
        opportunities=(
            Opportunity("integration-keywords", "Integration queries for popular tools",
                        ("'[tool] integration' impressions",), "Launch integration-focused ad groups"),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert SaaS PPC strategist analyzing Google Ads performance for a "
            "subscription software business. Your recommendations should focus on reducing "
            "customer acquisition cost (CAC) while maintaining or improving trial and demo quality."
        ),
        analysis_instructions=(
            "Analyze the provided keyword and campaign data with these priorities:\n\n"
            "1. CAC OPTIMIZATION: Identify keywords and campaigns with above-target CAC.\n\n"
            "2. TRIAL VOLUME GROWTH: Find efficient keywords constrained by budget or bids.\n\n"
            "3. COMPETITOR STRATEGY: Evaluate competitor and alternative keyword performance.\n\n"
            "4. FEATURE COVERAGE: Identify feature and integration queries with untapped demand."
        ),
        output_guidance=(
            "Structure recommendations as specific, actionable items:\n"
            "- Lead with the acquisition impact (trials, demos or CAC savings)\n"
            "- Specify exact keywords, campaigns, or settings to change"
        ),
        examples=(
            SEMExample(
                scenario="Generic category term with high CAC",
                data='Keyword "project management software" - $3,200/month spend, $410 CAC, 8 trials',
                recommendation=(
                    'Lower bids on "project management software" by 20% and shift budget to '
                    '"gantt chart software for agencies" at $180 CAC.'
                ),
                reasoning="Specific feature queries signal a closer fit and convert to paid more often.",
            ),
        ),
        constraints=(
            "NEVER reference average order value - revenue is recurring, not per order",
            "NEVER recommend Shopping campaigns, product feeds, or local targeting",
            "Weigh trial quality alongside trial volume",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("cac-reduction", "competitor-strategy", "feature-keyword-expansion", "negative-keywords"),
            deprioritize=("brand-campaign-changes", "complete-restructure"),
            exclude=("shopping-campaign", "product-feed", "local-targeting"),
        ),
        max_recommendations=8,
        require_quantified_impact=True,
    ),
)


SAAS_SEO_SKILL = SEOSkillDefinition(
    version=VERSION,
    context=SEOContext(
        site_type="Subscription software marketing site with feature, pricing, comparison and documentation pages.",
        primary_goal="Capture buyers at each stage from category research to vendor comparison and convert them to trials.",
        content_strategy="Feature depth, honest comparison pages, integration pages and educational content.",
    ),
    schema=SEOSchemaConfig(
        required=(
            SchemaRule("SoftwareApplication", "Software product details with offers nested inside", "required",
                       "Include applicationCategory, operatingSystem and aggregateRating where available."),
            SchemaRule("Organization", "Company information", "required"),
        ),
        recommended=(
            SchemaRule("FAQPage", "Pricing and feature FAQs", "recommended"),
            SchemaRule("HowTo", "Setup and usage guides", "optional"),
            SchemaRule("VideoObject", "Product demo videos", "optional"),
        ),
        invalid=(
            SchemaRule("Product", "Physical product schema", "required",
                       "Use SoftwareApplication for software."),
            SchemaRule("LocalBusiness", "Location-based business schema", "required"),
        ),
        page_type_rules=(
            PageTypeSchemaRule("pricing", ("SoftwareApplication",), ("FAQPage",), ("Product",)),
            PageTypeSchemaRule("feature", ("SoftwareApplication", "BreadcrumbList"), ("VideoObject",), ("Product",)),
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("organicTrials", "critical", "Trials attributed to organic search", "higher",
                          "Primary SEO outcome."),
            KPIDefinition("comparisonPageVisibility", "critical", "Ranking of comparison and alternative pages",
                          "lower", "Vendor comparison is a late-stage buying signal.", benchmark=5),
        ),
        secondary=(
            KPIDefinition("organicCtr", "high", "Search click-through rate", "higher",
                          "Title and description effectiveness.", benchmark=0.035),
        ),
        irrelevant=("aov", "productPageVisibility", "localPackPresence"),
    ),
    benchmarks={
        "organicCtr": ThresholdSet(0.05, 0.035, 0.02, 0.01),
        "bounceRate": ThresholdSet(0.35, 0.45, 0.55, 0.70),
        "avgPosition": ThresholdSet(3, 8, 15, 30),
        "pageLoadTime": ThresholdSet(1.5, 2.5, 3.5, 5.0),
    },
    analysis=SEOAnalysisConfig(
        content_patterns=(
            ContentPattern("thin-feature-pages", "Thin Feature Pages",
                           "Feature pages with screenshots, use cases and FAQs",
                           "One paragraph per feature",
                           "Expand each core feature page with use cases, visuals and FAQs."),
            ContentPattern("missing-comparisons", "Missing Comparison Pages",
                           "Dedicated pages for top competitors",
                           "No 'vs' or 'alternative' pages",
                           "Create comparison pages for the top three competitors."),
        ),
        technical_checks=(
            TechnicalCheck("js-rendering", "JavaScript Rendering", "critical",
                           "Marketing pages must render content without client-side JavaScript"),
            TechnicalCheck("docs-indexing", "Documentation Indexing", "high",
                           "Public docs should be crawlable and linked from product pages"),
        ),
        on_page_factors=(
            OnPageFactor("title-tag", "critical", 'Format: "Feature - Product | Category". Under 60 characters.'),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert SaaS SEO strategist analyzing organic search performance for a "
            "subscription software business. Your recommendations should focus on product page "
            "visibility, comparison content effectiveness, and organic trial generation."
        ),
        analysis_instructions=(
            "Analyze the provided page data with these priorities:\n\n"
            "1. FEATURE PAGE OPTIMIZATION: Assess depth, visuals and conversion paths.\n\n"
            "2. COMPARISON CONTENT: Check for competitor and alternative pages.\n\n"
            "3. SCHEMA: Verify SoftwareApplication and Organization schema."
        ),
        output_guidance="Reference specific URLs and prioritize by trial impact.",
        examples=(
            SEOExample(
                scenario="Pricing page without structured data",
                page_data="URL: /pricing - Position 9 for \"[brand] pricing\", no SoftwareApplication schema",
                recommendation="Implement SoftwareApplication schema with nested offers for each plan.",
                reasoning="Rich results on pricing queries reassure buyers during vendor evaluation.",
            ),
        ),
        constraints=(
            "NEVER recommend Product schema - use SoftwareApplication",
            "NEVER recommend local SEO or LocalBusiness schema",
            "NEVER reference average order value",
        ),
    ),
    common_issues=CommonIssues(
        critical=(
            CommonIssue("missing-software-schema", "No SoftwareApplication schema",
                        "Search engines cannot identify the product",
                        "Implement SoftwareApplication schema on product and pricing pages"),
        ),
        warnings=(
            CommonIssue("gated-content", "Valuable content behind signup walls",
                        "Crawlers cannot index gated resources", "Publish indexable summaries"),
        ),
        false_positives=("No LocalBusiness schema - expected for SaaS",),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("schema-implementation", "comparison-content", "feature-page-expansion"),
            deprioritize=("site-architecture-overhaul", "cms-migration"),
            exclude=("product-schema", "local-seo", "shopping-optimization"),
        ),
        max_recommendations=8,
    ),
)


SAAS_DIRECTOR_SKILL = DirectorSkillDefinition(
    version=VERSION,
    context=DirectorContext(
        business_priorities=(
            "Reduce customer acquisition cost",
            "Grow trial and demo volume",
            "Win competitor comparison searches",
        ),
        success_metrics=(
            "Trials and demos (paid + organic)",
            "Blended CAC",
            "CAC payback period",
        ),
        executive_framing=(
            "Leadership thinks in MRR, CAC payback and LTV:CAC. Frame recommendations in terms "
            "of pipeline growth and acquisition efficiency."
        ),
    ),
    synthesis=SynthesisConfig(
        conflict_resolution=(
            ConflictRule("competitor-bidding", "Recommend bidding on competitor brand terms",
                         "Recommend organic comparison pages instead",
                         "Run both: comparison pages as landing pages for competitor campaigns.",
                         "hybrid"),
        ),
        synergy_identification=(
            SynergyRule("comparison-page-leverage", "Competitor terms converting in paid",
                        "Comparison pages missing or weak",
                        "Build comparison pages and reuse them as paid landing pages."),
        ),
        prioritization=(
            PrioritizationRule("Recommendation reduces CAC by more than 40%", "boost", 1.8,
                               "Acquisition efficiency compounds across the subscription lifetime"),
            PrioritizationRule("Recommendation only improves vanity traffic", "exclude", 0,
                               "Focus on conversion and acquisition impact"),
        ),
    ),
    filtering=FilteringConfig(
        max_recommendations=10,
        min_impact_threshold="medium",
        impact_weights=ImpactWeights(revenue=0.30, cost=0.30, effort=0.20, risk=0.20),
        must_include=("schema:SoftwareApplication",),
        must_exclude=(
            "metric:aov",
            "schema:Product",
            "schema:Offer",
            "schema:LocalBusiness",
            "type:shopping-campaign",
            "type:merchant-center",
            "type:product-feed",
            "type:local-targeting",
        ),
    ),
    executive_summary=ExecutiveSummaryConfig(
        focus_areas=("Pipeline growth", "CAC efficiency", "Competitive positioning"),
        metrics_to_quantify=("Additional trials per month", "CAC reduction"),
        framing_guidance="Lead with pipeline impact and express savings as CAC improvements.",
        max_highlights=5,
    ),
    prompt=DirectorPromptConfig(
        role_context=(
            "You are a senior digital marketing director synthesizing SEM and SEO recommendations "
            "for a SaaS business. Your role is to create a unified strategy that maximizes trial "
            "and demo volume while optimizing customer acquisition cost."
        ),
        synthesis_instructions=(
            "Review the SEM and SEO agent outputs and create a unified recommendation set:\n\n"
            "1. IDENTIFY SYNERGIES: Comparison pages help both channels.\n"
            "2. RESOLVE CONFLICTS: Decide based on CAC and trial impact.\n"
            "3. CONSOLIDATE DUPLICATES: Merge similar recommendations."
        ),
        prioritization_guidance="Rank by trial impact, CAC efficiency, effort and risk.",
        output_format=(
            "EXECUTIVE SUMMARY: pipeline opportunity plus key highlights.\n"
            "UNIFIED RECOMMENDATIONS: title, type, impact, effort, description and action items."
        ),
        constraints=(
            "NEVER mention average order value",
            "NEVER recommend Product or LocalBusiness schema",
            "NEVER recommend Shopping campaigns or local targeting",
        ),
    ),
)


SAAS_SKILL_BUNDLE = AgentSkillBundle(
    business_type=BusinessType.SAAS,
    version=VERSION,
    scout=SAAS_SCOUT_SKILL,
    researcher=SAAS_RESEARCHER_SKILL,
    sem=SAAS_SEM_SKILL,
    seo=SAAS_SEO_SKILL,
    director=SAAS_DIRECTOR_SKILL,
)
