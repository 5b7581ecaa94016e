"""
Local Business Skill Bundle

Location-bound businesses converting through calls, direction requests and
store visits. ROAS, recurring-revenue metrics and software schema never apply.
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


LOCAL_SCOUT_SKILL = ScoutSkillDefinition(
    version=VERSION,
    # Smaller budgets; the local pack is the top 3
    thresholds=ScoutThresholds(
        high_spend_threshold=200,
        low_roas_threshold=0,
        cannibalization_position=3,
        high_bounce_rate_threshold=0.60,
        low_ctr_threshold=0.030,
        min_impressions_for_analysis=30,
    ),
    priority_rules=ScoutPriorityRules(
        battleground_keywords=(
            PriorityRule(
                id="high-spend-low-conversions",
                name="High Spend, Low Conversions",
                description="Keywords with significant spend but few calls or visits",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("spend", ">", threshold="high_spend_threshold"),
                    when("conversions", "<", 3),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="local-pack-overlap",
                name="Local Pack Overlap",
                description="Paying for terms where the business already ranks in the local pack",
                priority=RulePriority.HIGH,
                conditions=(
                    when("organic_position", "<=", threshold="cannibalization_position"),
                    when("spend", ">", 100),
                ),
                reason="cannibalization_risk",
            ),
            PriorityRule(
                id="location-keyword-match",
                name="Location Keyword Match",
                description="Converting keywords that could scale",
                priority=RulePriority.HIGH,
                conditions=(when("conversions", ">", 2),),
                reason="growth_potential",
            ),
            PriorityRule(
                id="gmb-opportunity",
                name="Google Business Profile Opportunity",
                description="Local-intent keywords ranking outside the local pack",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("organic_position", ">", 5),
                    when("impressions", ">", 50),
                ),
                reason="competitive_pressure",
            ),
        ),
        critical_pages=(
            PriorityRule(
                id="high-spend-landing",
                name="High Spend Landing Page",
                description="Landing pages receiving significant paid traffic without organic rank",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("paid_spend", ">", 150),
                    when("organic_position", ">", 10),
                ),
                reason="high_spend_low_organic",
            ),
            PriorityRule(
                id="location-page-issues",
                name="Location Page Issues",
                description="Pages losing local visitors before they call or visit",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("bounce_rate", ">", threshold="high_bounce_rate_threshold"),
                    when("sessions", ">", 50),
                ),
                reason="high_traffic_high_bounce",
            ),
            PriorityRule(
                id="hours-page-visibility",
                name="Hours & Location Visibility",
                description="Pages seen in search but rarely clicked",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("impressions", ">", 300),
                    when("ctr", "<", threshold="low_ctr_threshold"),
                ),
                reason="high_impressions_low_ctr",
            ),
        ),
    ),
    metrics=ScoutMetricsConfig(
        include=("spend", "conversions", "calls", "directions", "ctr", "cpc", "impressions", "position"),
        exclude=("roas", "mrr", "arr"),
        primary=("conversions", "calls"),
    ),
    limits=ScoutLimits(max_battleground_keywords=15, max_critical_pages=10),
)


LOCAL_RESEARCHER_SKILL = ResearcherSkillDefinition(
    version=VERSION,
    keyword_enrichment=KeywordEnrichmentConfig(
        competitive_metrics=CompetitiveMetricsConfig(
            required=("impressionShare", "lostImpressionShareRank", "lostImpressionShareBudget"),
            optional=("topOfPageRate", "absTopOfPageRate"),
        ),
        priority_boosts=(
            PriorityBoost.from_condition("impressionShare", "< 40", 2, "Local demand the business is missing"),
            PriorityBoost.from_condition("lostImpressionShareBudget", "> 30", 1.5, "Local keyword limited by budget"),
        ),
    ),
    page_enrichment=PageEnrichmentConfig(
        schema_extraction=SchemaExtractionConfig(
            look_for=(
                "LocalBusiness", "Organization", "PostalAddress", "GeoCoordinates",
                "OpeningHoursSpecification", "AggregateRating", "Review", "Service",
                "Restaurant", "Dentist", "Plumber", "Attorney", "Store",
            ),
            flag_if_present=("SoftwareApplication", "WebApplication"),
            flag_if_missing=("LocalBusiness", "PostalAddress"),
        ),
        content_signals=(
            ContentSignal("nap-display", "Address Display",
                          '[class*="address"], [itemtype*="PostalAddress"], .business-address',
                          "critical", "Name, address and phone visible"),
            ContentSignal("phone-clicktocall", "Click-to-Call",
                          'a[href^="tel:"], [class*="phone"], .phone-number',
                          "critical", "Tap-to-call phone number"),
            ContentSignal("google-maps-embed", "Map Embed",
                          'iframe[src*="google.com/maps"], [class*="map"], .google-map',
                          "high", "Embedded map"),
            ContentSignal("hours-display", "Business Hours",
                          '[class*="hours"], [itemtype*="OpeningHours"], .business-hours',
                          "high", "Opening hours"),
            ContentSignal("reviews-display", "Reviews",
                          '[class*="review"], [class*="testimonial"], .customer-review',
                          "high", "Customer reviews"),
            ContentSignal("directions-link", "Directions Link",
                          'a[href*="maps.google"], a[href*="directions"], .get-directions',
                          "medium", "Link to driving directions"),
        ),
        page_classification=PageClassificationConfig(
            patterns=(
                PageClassificationPattern(r"/locations/|/our-locations/|/find-us/", "locations", "Locations index", 0.9),
                PageClassificationPattern(r"/location/[^/]+|/store/[^/]+", "location-detail", "Single location page", 0.9),
                PageClassificationPattern(r"/service-area/|/areas-served/|/we-serve/", "service-area", "Service area page", 0.85),
                PageClassificationPattern(r"/services/|/our-services/", "services", "Services overview", 0.85),
                PageClassificationPattern(r"/service/[^/]+", "service-detail", "Single service page", 0.85),
                PageClassificationPattern(r"/contact|/contact-us|/reach-us", "contact", "Contact page", 0.95),
                PageClassificationPattern(r"/about|/about-us|/our-story", "about", "About page", 0.85),
                PageClassificationPattern(r"/reviews|/testimonials|/what-people-say", "reviews", "Reviews page", 0.85),
                PageClassificationPattern(r"/hours|/schedule|/appointments", "hours", "Hours page", 0.85),
                PageClassificationPattern(r"/blog/|/news/|/updates/", "content", "Content page", 0.8),
            ),
            default_type="landing",
            confidence_threshold=0.7,
        ),
    ),
    data_quality=DataQualityConfig(
        min_keywords_with_competitive_data=5,
        min_pages_with_content=3,
        max_fetch_timeout_ms=15000,
        max_concurrent_fetches=5,
    ),
)


LOCAL_SEM_SKILL = SEMSkillDefinition(
    version=VERSION,
    context=SEMContext(
        business_model=(
            "Location-bound business winning customers from a defined service radius. Calls, "
            "direction requests and store visits are the outcomes; offline revenue is rarely tracked."
        ),
        conversion_definition="A conversion is a phone call, a direction request, or a booked appointment.",
        typical_customer_journey="Local need -> 'near me' search -> Map pack comparison -> Call or visit",
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("calls", "critical", "Phone calls from ads", "higher",
                          "Calls are the strongest local intent signal."),
            KPIDefinition("costPerConversion", "critical", "Cost per call or visit", "lower",
                          "Efficiency within a small budget.", benchmark=40),
        ),
        secondary=(
            KPIDefinition("ctr", "medium", "Click-through rate", "higher",
                          "Local intent should produce high CTR.", benchmark=0.05),
            KPIDefinition("directions", "high", "Direction requests", "higher",
                          "Proxy for store visits."),
        ),
        irrelevant=("roas", "mrr", "arr", "aov"),
    ),
    benchmarks={
        "ctr": ThresholdSet(0.07, 0.05, 0.03, 0.015),
        "conversionRate": ThresholdSet(0.10, 0.07, 0.04, 0.02),
        "cpc": ThresholdSet(1.5, 3.0, 5.0, 9.0),
        "costPerConversion": ThresholdSet(20, 40, 70, 120),
    },
    analysis=SEMAnalysisConfig(
        key_patterns=(
            AnalysisPattern("near-me-strength", "Near Me Strength",
                            "'near me' queries converting efficiently",
                            ("High call rate on near-me terms",),
                            "Increase bids within the core radius"),
        ),
        anti_patterns=(
            AnalysisPattern("radius-leak", "Radius Leak",
                            "Clicks from outside the realistic travel distance",
                            ("Conversions concentrated in a small area",),
                            "Tighten location targeting and add radius bid adjustments"),
            AnalysisPattern("missing-call-assets", "Missing Call Assets",
                            "Mobile traffic without call assets",
                            ("Mobile-heavy clicks", "Few call conversions"),
                            "Add call assets and track calls as conversions"),
        ),
        opportunities=(
            Opportunity("call-only-campaigns", "Call-only ads for mobile searchers",
                        ("Mobile share above 60%",), "Launch call-only ads during business hours"),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert local PPC strategist analyzing Google Ads performance for a "
            "location-bound business. Your recommendations should drive calls, direction requests "
            "and visits from the service area at the lowest cost."
        ),
        analysis_instructions=(
            "Analyze the provided keyword data with these priorities:\n\n"
            "1. CALL AND VISIT EFFICIENCY: Find keywords with high cost per call or visit.\n\n"
            "2. GEOGRAPHIC FOCUS: Ensure spend stays inside the service radius.\n\n"
            "3. SCHEDULING: Align ad schedules with business hours."
        ),
        output_guidance="Express impact as additional calls or visits and cost savings.",
        examples=(
            SEMExample(
                scenario="Spend leaking outside the service area",
                data='Keyword "dentist near me" - $600/month spend, 40% of clicks from over 25 miles away',
                recommendation="Restrict targeting to a 10 mile radius and add a +20% bid adjustment within 3 miles.",
                reasoning="Patients rarely travel far for routine care.",
            ),
        ),
        constraints=(
            "NEVER mention ROAS - offline revenue is not tracked",
            "NEVER reference MRR or ARR",
            "Respect business hours when recommending schedules",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("geographic-targeting", "call-optimization", "ad-schedule", "negative-keywords"),
            deprioritize=("complete-restructure",),
            exclude=("shopping-campaign", "product-feed", "roas-targeting"),
        ),
        max_recommendations=6,
        require_quantified_impact=True,
    ),
)


LOCAL_SEO_SKILL = SEOSkillDefinition(
    version=VERSION,
    context=SEOContext(
        site_type="Local business site with location, service and contact pages.",
        primary_goal="Win map pack and local organic results and turn them into calls and visits.",
        content_strategy="Unique location pages, consistent NAP, reviews and service-area content.",
    ),
    schema=SEOSchemaConfig(
        required=(
            SchemaRule("LocalBusiness", "Business details with address, geo and hours", "required",
                       "Use the most specific subtype available (Dentist, Plumber, ...)."),
            SchemaRule("PostalAddress", "Structured business address", "required"),
        ),
        recommended=(
            SchemaRule("OpeningHoursSpecification", "Opening hours", "recommended"),
            SchemaRule("AggregateRating", "Review summary", "recommended"),
        ),
        invalid=(
            SchemaRule("SoftwareApplication", "Software schema on a local site", "required"),
        ),
        page_type_rules=(
            PageTypeSchemaRule("location-detail", ("LocalBusiness", "PostalAddress"), ("AggregateRating",),
                               ("SoftwareApplication",)),
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("localPackPresence", "critical", "Appearances in the local map pack", "higher",
                          "Most local clicks happen in the map pack."),
            KPIDefinition("organicCalls", "critical", "Calls from organic and map listings", "higher",
                          "Primary local SEO outcome."),
        ),
        secondary=(
            KPIDefinition("organicCtr", "high", "Search click-through rate", "higher",
                          "Local intent produces high CTR.", benchmark=0.05),
        ),
        irrelevant=("mrr", "arr", "roas"),
    ),
    benchmarks={
        "organicCtr": ThresholdSet(0.08, 0.05, 0.03, 0.015),
        "bounceRate": ThresholdSet(0.35, 0.45, 0.60, 0.75),
        "avgPosition": ThresholdSet(3, 7, 15, 30),
        "pageLoadTime": ThresholdSet(1.5, 2.5, 4.0, 6.0),
    },
    analysis=SEOAnalysisConfig(
        content_patterns=(
            ContentPattern("duplicate-location-pages", "Duplicate Location Pages",
                           "Each location page has unique staff, directions and reviews",
                           "City-name swaps of one template",
                           "Write unique content for each location."),
        ),
        technical_checks=(
            TechnicalCheck("nap-consistency", "NAP Consistency", "critical",
                           "Name, address and phone identical on every page and listing"),
            TechnicalCheck("mobile-usability", "Mobile Experience", "critical",
                           "Most local searches happen on phones"),
        ),
        on_page_factors=(
            OnPageFactor("title-tag", "critical", 'Format: "Service in City | Business". Under 60 characters.'),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert local SEO strategist analyzing organic and map pack performance "
            "for a location-bound business."
        ),
        analysis_instructions=(
            "Analyze the provided page data with these priorities:\n\n"
            "1. LOCAL SIGNALS: NAP, hours, maps and reviews on location pages.\n\n"
            "2. SCHEMA: Verify LocalBusiness schema with address and hours.\n\n"
            "3. LOCATION CONTENT: Unique content per location and service area."
        ),
        output_guidance="Reference specific URLs and express impact as calls or visits.",
        examples=(
            SEOExample(
                scenario="Location page without LocalBusiness schema",
                page_data="URL: /location/downtown - Position 11, no LocalBusiness schema, hours only in an image",
                recommendation="Implement LocalBusiness schema with address, geo and opening hours; publish hours as text.",
                reasoning="Structured hours and address feed the map pack and voice search.",
            ),
        ),
        constraints=(
            "NEVER recommend SoftwareApplication schema",
            "NEVER reference ROAS, MRR or ARR",
        ),
    ),
    common_issues=CommonIssues(
        critical=(
            CommonIssue("missing-localbusiness-schema", "No LocalBusiness schema",
                        "Map and local results lack structured business details",
                        "Implement LocalBusiness schema on every location page"),
        ),
        warnings=(
            CommonIssue("hours-in-images", "Opening hours published only as images",
                        "Hours cannot be read by crawlers", "Publish hours as text with schema"),
        ),
        false_positives=("No FAQ content on small location pages",),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("schema-implementation", "local-seo", "technical-fix"),
            deprioritize=("site-architecture-overhaul",),
            exclude=("software-schema", "shopping-optimization"),
        ),
        max_recommendations=8,
    ),
)


LOCAL_DIRECTOR_SKILL = DirectorSkillDefinition(
    version=VERSION,
    context=DirectorContext(
        business_priorities=(
            "More calls and visits from the service area",
            "Lower cost per call",
            "Stronger map pack presence",
        ),
        success_metrics=("Calls and direction requests", "Cost per call", "Local pack rankings"),
        executive_framing=(
            "Owners think in phone calls and customers through the door. Frame impact as calls, "
            "visits and monthly cost."
        ),
    ),
    synthesis=SynthesisConfig(
        conflict_resolution=(
            ConflictRule("map-pack-overlap", "Keep bidding on terms where the map listing ranks top 3",
                         "Map listing already ranks top 3",
                         "Reduce bids during hours the map listing ranks and watch call volume.",
                         "hybrid"),
        ),
        synergy_identification=(
            SynergyRule("location-page-landing", "Location campaigns driving calls",
                        "Location pages lacking local signals",
                        "Improve location pages and use them as campaign landing pages."),
        ),
        prioritization=(
            PrioritizationRule("Recommendation fixes NAP or phone issues", "require", 1.0,
                               "Broken contact details lose customers immediately"),
        ),
    ),
    filtering=FilteringConfig(
        max_recommendations=8,
        min_impact_threshold="medium",
        impact_weights=ImpactWeights(revenue=0.30, cost=0.25, effort=0.25, risk=0.20),
        must_include=("schema:LocalBusiness",),
        must_exclude=(
            "metric:roas",
            "metric:mrr",
            "metric:arr",
            "schema:SoftwareApplication",
            "type:shopping-campaign",
            "type:merchant-center",
        ),
    ),
    executive_summary=ExecutiveSummaryConfig(
        focus_areas=("Call and visit growth", "Local visibility", "Budget efficiency"),
        metrics_to_quantify=("Additional calls per month", "Cost per call change"),
        framing_guidance="Keep it practical and owner-friendly. Never use ROAS or recurring revenue.",
        max_highlights=4,
    ),
    prompt=DirectorPromptConfig(
        role_context=(
            "You are a senior digital marketing director synthesizing SEM and SEO recommendations "
            "for a local business. Your role is to create a unified plan that drives calls and "
            "visits from the service area."
        ),
        synthesis_instructions=(
            "Review the SEM and SEO agent outputs and create a unified recommendation set:\n\n"
            "1. IDENTIFY SYNERGIES between map pack presence and local campaigns.\n"
            "2. RESOLVE CONFLICTS by their effect on calls and visits.\n"
            "3. CONSOLIDATE DUPLICATES."
        ),
        prioritization_guidance="Rank by calls and visits gained, cost, effort and risk.",
        output_format=(
            "EXECUTIVE SUMMARY: local opportunity plus key highlights.\n"
            "UNIFIED RECOMMENDATIONS: title, type, impact, effort, description and action items."
        ),
        constraints=(
            "NEVER mention ROAS, MRR or ARR",
            "NEVER recommend SoftwareApplication schema or Shopping campaigns",
        ),
    ),
)


LOCAL_SKILL_BUNDLE = AgentSkillBundle(
    business_type=BusinessType.LOCAL,
    version=VERSION,
    scout=LOCAL_SCOUT_SKILL,
    researcher=LOCAL_RESEARCHER_SKILL,
    sem=LOCAL_SEM_SKILL,
    seo=LOCAL_SEO_SKILL,
    director=LOCAL_DIRECTOR_SKILL,
)
