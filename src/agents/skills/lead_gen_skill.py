"""
Lead Generation Skill Bundle

Service businesses converting through forms and phone calls. Success is lead
volume and cost per lead; ROAS, revenue and Product schema never apply.
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


LEAD_GEN_SCOUT_SKILL = ScoutSkillDefinition(
    version=VERSION,
    thresholds=ScoutThresholds(
        high_spend_threshold=300,
        low_roas_threshold=0,
        cannibalization_position=5,
        high_bounce_rate_threshold=0.70,
        low_ctr_threshold=0.02,
        min_impressions_for_analysis=50,
    ),
    priority_rules=ScoutPriorityRules(
        battleground_keywords=(
            PriorityRule(
                id="high-spend-low-conversions",
                name="High Spend, Few Leads",
                description="Keywords with significant spend generating few leads",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("spend", ">", threshold="high_spend_threshold"),
                    when("conversions", "<", 3),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="high-cpl-keywords",
                name="High Cost Per Lead",
                description="Converting keywords whose cost per lead is far above target",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("cost_per_conversion", ">", 150),
                    when("conversions", ">", 2),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="cannibalization-risk",
                name="Paid/Organic Overlap",
                description="Paying for service keywords that already rank organically",
                priority=RulePriority.HIGH,
                conditions=(
                    when("organic_position", "<=", threshold="cannibalization_position"),
                    when("spend", ">", 100),
                ),
            ),
            PriorityRule(
                id="high-intent-opportunity",
                name="High-Intent Opportunity",
                description="Keywords converting well that could scale",
                priority=RulePriority.MEDIUM,
                conditions=(when("conversions", ">", 5),),
                reason="growth_potential",
            ),
        ),
        critical_pages=(
            PriorityRule(
                id="high-spend-service-page",
                name="High Spend Service Page",
                description="Service pages receiving significant paid traffic without organic rank",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("paid_spend", ">", 250),
                    when("organic_position", ">", 10),
                ),
                reason="high_spend_low_organic",
            ),
            PriorityRule(
                id="high-bounce-landing",
                name="High Bounce Landing Page",
                description="Landing pages losing visitors before they contact",
                priority=RulePriority.HIGH,
                conditions=(
                    when("bounce_rate", ">", threshold="high_bounce_rate_threshold"),
                    when("sessions", ">", 75),
                ),
                reason="high_traffic_high_bounce",
            ),
            PriorityRule(
                id="service-page-opportunity",
                name="Service Page CTR Opportunity",
                description="Service pages with impressions but weak click-through",
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
        include=("spend", "conversions", "cpl", "ctr", "cpc", "impressions", "position", "bounceRate"),
        exclude=("roas", "revenue", "aov", "conversionValue"),
        primary=("cpl", "conversions"),
    ),
    limits=ScoutLimits(max_battleground_keywords=20, max_critical_pages=12),
)


LEAD_GEN_RESEARCHER_SKILL = ResearcherSkillDefinition(
    version=VERSION,
    keyword_enrichment=KeywordEnrichmentConfig(
        competitive_metrics=CompetitiveMetricsConfig(
            required=("impressionShare", "lostImpressionShareRank", "lostImpressionShareBudget"),
            optional=("topOfPageRate", "absTopOfPageRate", "outrankingShare"),
        ),
        priority_boosts=(
            PriorityBoost.from_condition("impressionShare", "< 40", 2, "Converting keyword with visibility headroom"),
            PriorityBoost.from_condition("lostImpressionShareBudget", "> 30", 1.5, "Efficient keyword limited by budget"),
            PriorityBoost.from_condition("topOfPageRate", "< 50", 1.3, "High-intent query not achieving top positions"),
        ),
    ),
    page_enrichment=PageEnrichmentConfig(
        schema_extraction=SchemaExtractionConfig(
            look_for=("Service", "ProfessionalService", "Organization", "LocalBusiness", "FAQPage", "Review", "BreadcrumbList"),
            flag_if_present=("Product", "Offer", "AggregateOffer"),
            flag_if_missing=("Organization",),
        ),
        content_signals=(
            ContentSignal("contact-form", "Contact Form",
                          'form[class*="contact"], form[id*="contact"], form[action*="contact"], .contact-form',
                          "critical", "Lead capture form presence"),
            ContentSignal("phone-number", "Phone Number",
                          'a[href^="tel:"], [class*="phone"], .phone-number, [data-phone]',
                          "critical", "Click-to-call availability"),
            ContentSignal("trust-signals", "Trust Signals",
                          '[class*="certification"], [class*="award"], [class*="badge"], .trust-badge',
                          "high", "Certifications and awards"),
            ContentSignal("testimonials", "Testimonials",
                          '[class*="testimonial"], [class*="review"], .client-review, blockquote',
                          "high", "Client testimonials"),
            ContentSignal("cta-buttons", "Call To Action",
                          '[class*="cta"], .get-quote, .free-consultation, .contact-us',
                          "high", "Quote or consultation CTA"),
        ),
        page_classification=PageClassificationConfig(
            patterns=(
                PageClassificationPattern(r"/services/|/our-services/|/what-we-do/", "service", "Service overview page", 0.9),
                PageClassificationPattern(r"/service/[^/]+/?$", "service-detail", "Individual service page", 0.85),
                PageClassificationPattern(r"/contact|/get-in-touch|/reach-us", "contact", "Contact page", 0.95),
                PageClassificationPattern(r"/quote|/free-quote|/get-quote|/estimate", "quote", "Quote request page", 0.95),
                PageClassificationPattern(r"/consultation|/book|/schedule", "booking", "Booking page", 0.9),
                PageClassificationPattern(r"/locations/|/areas-served/|/service-areas/", "location", "Service area page", 0.85),
                PageClassificationPattern(r"/case-studies/|/portfolio/|/our-work/", "portfolio", "Case study page", 0.85),
                PageClassificationPattern(r"/blog/|/resources/|/articles/", "content", "Content page", 0.8),
            ),
            default_type="landing",
            confidence_threshold=0.7,
        ),
    ),
    data_quality=DataQualityConfig(
        min_keywords_with_competitive_data=8,
        min_pages_with_content=4,
        max_fetch_timeout_ms=15000,
        max_concurrent_fetches=5,
    ),
)


LEAD_GEN_SEM_SKILL = SEMSkillDefinition(
    version=VERSION,
    context=SEMContext(
        business_model=(
            "Service business generating leads through form submissions and phone calls. Success is "
            "measured by lead volume and cost efficiency, not direct revenue. Lead quality matters "
            "as much as quantity."
        ),
        conversion_definition=(
            "A conversion is a qualified lead - form submission, phone call, or consultation request."
        ),
        typical_customer_journey=(
            "Problem awareness -> Solution research (comparing providers) -> Consideration (reviews, "
            "credentials) -> Contact (form/call) -> Sales follow-up -> Close"
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("cpl", "critical", "Cost Per Lead - average cost to acquire a lead", "lower",
                          "Primary efficiency metric. Should be well below expected customer value.",
                          benchmark=75),
            KPIDefinition("conversions", "critical", "Total number of leads generated", "higher",
                          "Volume metric. Balance against CPL."),
            KPIDefinition("conversionRate", "critical", "Percentage of clicks that become leads", "higher",
                          "Landing page and targeting effectiveness indicator.", benchmark=0.05),
        ),
        secondary=(
            KPIDefinition("ctr", "medium", "Click-through rate", "higher",
                          "Ad relevance indicator.", benchmark=0.03),
            KPIDefinition("callConversions", "high", "Phone call leads from ads", "higher",
                          "Phone leads often higher quality than form submissions."),
            KPIDefinition("qualityScore", "medium", "Google Ads quality score", "higher",
                          "Affects CPC and ad position.", benchmark=7),
        ),
        irrelevant=("roas", "revenue", "aov", "conversionValue", "transactionId", "mrr", "arr"),
    ),
    benchmarks={
        "ctr": ThresholdSet(0.05, 0.035, 0.02, 0.01),
        "conversionRate": ThresholdSet(0.08, 0.05, 0.03, 0.015),
        "cpc": ThresholdSet(2.0, 4.0, 7.0, 12.0),
        "costPerConversion": ThresholdSet(30, 60, 100, 175),
    },
    analysis=SEMAnalysisConfig(
        key_patterns=(
            AnalysisPattern("call-extension-success", "Call Extension Performance",
                            "Call extensions driving significant lead volume",
                            ("High call conversion share", "Mobile-heavy traffic"),
                            "Maximize call extension visibility, consider call-only campaigns for mobile"),
            AnalysisPattern("service-keyword-strength", "Service Keyword Strength",
                            "Service-specific keywords outperforming generic terms",
                            ("Lower CPL on specific services", "Higher conversion rate"),
                            "Expand specific service keyword coverage, reduce generic term spend"),
        ),
        anti_patterns=(
            AnalysisPattern("broad-match-waste", "Broad Match Budget Waste",
                            "Broad match capturing irrelevant service queries",
                            ("DIY and job-seeker search terms", "High CPL on broad match"),
                            "Tighten match types, add extensive negative keywords"),
            AnalysisPattern("geographic-mismatch", "Geographic Targeting Mismatch",
                            "Spending in areas outside service territory",
                            ("Clicks from outside service area",),
                            "Tighten location targeting to actual service areas"),
        ),
        opportunities=(
            Opportunity("call-only-campaigns", "Call-only campaign opportunity for mobile traffic",
                        ("High mobile share", "Strong call conversions"), "Launch call-only campaigns"),
            Opportunity("remarketing-leads", "Remarketing to site visitors who did not convert",
                        ("High visit volume", "Low conversion rate"),
                        "Implement RLSA and display remarketing for lead nurturing"),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert lead generation PPC strategist analyzing Google Ads performance for a "
            "service business. Your recommendations should focus on reducing cost per lead while "
            "maintaining or improving lead quality. Success is measured by lead volume and cost "
            "efficiency, NOT by direct revenue or ROAS."
        ),
        analysis_instructions=(
            "Analyze the provided keyword and campaign data with these priorities:\n\n"
            "1. COST PER LEAD OPTIMIZATION: Identify keywords and campaigns with above-target CPL.\n\n"
            "2. LEAD VOLUME GROWTH: Find efficient keywords that are budget or bid constrained.\n\n"
            "3. CALL vs FORM PERFORMANCE: Evaluate the balance between call and form conversions.\n\n"
            "4. GEOGRAPHIC EFFICIENCY: Ensure spend aligns with actual service areas.\n\n"
            "For each issue identified, quantify the potential impact in leads or cost savings."
        ),
        output_guidance=(
            "Structure recommendations as specific, actionable items:\n"
            "- Lead with the business impact (additional leads or cost savings)\n"
            "- Specify exact keywords, campaigns, or settings to change\n"
            "- Provide CPL targets or benchmarks for success"
        ),
        examples=(
            SEMExample(
                scenario="High-spend keyword with poor CPL",
                data='Keyword "plumber near me" - $1,800/month spend, $180 CPL, 2.1% CTR, 10 leads',
                recommendation=(
                    'Reduce bids on "plumber near me" by 25% and reallocate budget to "emergency plumber '
                    '[city]" which shows $65 CPL. Estimated savings: $400-600/month.'
                ),
                reasoning="Generic near-me queries often capture research-stage users.",
            ),
            SEMExample(
                scenario="Strong performer limited by budget",
                data='Keyword "roof repair quote" - $400/month spend, $45 CPL, 55% impression share lost to budget',
                recommendation=(
                    'Increase daily budget on "roof repair quote". At current CPL, an additional '
                    "$400/month could generate 9 more leads per month."
                ),
                reasoning="High-intent service queries with efficient CPL should maximize visibility.",
            ),
        ),
        constraints=(
            "NEVER mention ROAS - this is not an ecommerce business",
            "NEVER recommend Shopping campaigns or product feeds",
            "Focus on lead quality, not just volume - cheaper leads may not close",
            "Account for sales team capacity when recommending volume increases",
            "Ensure geographic targeting aligns with actual service areas",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("cpl-reduction", "call-optimization", "landing-page", "geographic-targeting", "negative-keywords"),
            deprioritize=("brand-campaign-changes", "complete-restructure"),
            exclude=("shopping-campaign", "product-feed", "roas-targeting", "revenue-maximization"),
        ),
        max_recommendations=8,
        require_quantified_impact=True,
    ),
)


LEAD_GEN_SEO_SKILL = SEOSkillDefinition(
    version=VERSION,
    context=SEOContext(
        site_type=(
            "Service business website focused on lead generation through form submissions and phone "
            "calls. Success is measured by organic lead volume and service page visibility."
        ),
        primary_goal=(
            "Drive organic traffic that converts to leads. Optimize service pages for discovery "
            "queries and build trust through content that demonstrates expertise."
        ),
        content_strategy=(
            "Service-focused content with process explanations and trust signals. Educational "
            "content captures research-phase traffic."
        ),
    ),
    schema=SEOSchemaConfig(
        required=(
            SchemaRule("Service", "Service structured data with provider and area served", "required",
                       "Include serviceType and areaServed."),
            SchemaRule("Organization", "Business information and contact details", "required"),
        ),
        recommended=(
            SchemaRule("FAQPage", "Service FAQs for rich results", "recommended"),
            SchemaRule("Review", "Customer testimonials and reviews", "recommended"),
            SchemaRule("LocalBusiness", "For businesses serving specific geographic areas", "optional"),
            SchemaRule("HowTo", "Process explanations and guides", "optional"),
        ),
        invalid=(
            SchemaRule("Product", "Product schema on service pages", "required",
                       "Services are not products. Use Service schema."),
            SchemaRule("Offer", "Offer schema for services", "required"),
            SchemaRule("AggregateOffer", "Multiple offers schema", "required"),
        ),
        page_type_rules=(
            PageTypeSchemaRule("service", ("Service", "BreadcrumbList"), ("FAQPage", "Review"), ("Product", "Offer")),
            PageTypeSchemaRule("contact", ("Organization",), ("LocalBusiness",), ("Product",)),
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("organicLeads", "critical", "Leads from organic search", "higher",
                          "Form submissions and calls attributed to organic."),
            KPIDefinition("servicePageVisibility", "critical", "Average position of service pages", "lower",
                          "Service pages should rank on page 1.", benchmark=10),
            KPIDefinition("organicConversionRate", "critical", "Organic sessions that become leads", "higher",
                          "Trust and CTA effectiveness indicator."),
        ),
        secondary=(
            KPIDefinition("organicCtr", "high", "Click-through rate from search results", "higher",
                          "Title and description effectiveness.", benchmark=0.04),
            KPIDefinition("localPackPresence", "high", "Appearance in the local map pack", "higher",
                          "Critical for geographically bound services."),
        ),
        irrelevant=("organicRevenue", "productPageVisibility", "aov"),
    ),
    benchmarks={
        "organicCtr": ThresholdSet(0.06, 0.04, 0.025, 0.012),
        "bounceRate": ThresholdSet(0.40, 0.50, 0.60, 0.75),
        "avgPosition": ThresholdSet(5, 10, 20, 35),
        "pageLoadTime": ThresholdSet(1.5, 2.5, 4.0, 6.0),
    },
    analysis=SEOAnalysisConfig(
        content_patterns=(
            ContentPattern("thin-service-content", "Thin Service Descriptions",
                           "Service pages with 500+ words covering process, benefits, FAQs",
                           "Service pages under 300 words with generic copy",
                           "Expand service pages with process explanations, benefits, FAQs, and case studies."),
            ContentPattern("missing-trust-signals", "Missing Trust Signals",
                           "Testimonials, certifications, and case studies on service pages",
                           "No social proof near the contact form",
                           "Add customer testimonials, certifications, and relevant case studies."),
        ),
        technical_checks=(
            TechnicalCheck("contact-form-accessibility", "Contact Form Accessibility", "critical",
                           "Forms must work on mobile and confirm submissions"),
            TechnicalCheck("phone-number-markup", "Phone Number Click-to-Call", "critical",
                           "Phone numbers wrapped in tel: links"),
            TechnicalCheck("mobile-usability", "Mobile Experience", "critical",
                           "Mobile-first indexing requires usable service pages"),
        ),
        on_page_factors=(
            OnPageFactor("title-tag", "critical", 'Format: "Service in City | Brand". Keep under 60 characters.'),
            OnPageFactor("cta-placement", "critical", "Clear CTAs for contact, quote, or consultation."),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert lead generation SEO strategist analyzing organic search performance "
            "for a service business. Your recommendations should focus on improving service page "
            "visibility and organic lead generation, applying E-E-A-T principles."
        ),
        analysis_instructions=(
            "Analyze the provided page data with these priorities:\n\n"
            "1. SERVICE PAGE OPTIMIZATION: Assess content depth, E-E-A-T signals, and conversion elements.\n\n"
            "2. TRUST SIGNALS: Check for testimonials, certifications, case studies, and credentials.\n\n"
            "3. TECHNICAL HEALTH: Check mobile usability, form functionality, and click-to-call.\n\n"
            "4. SCHEMA IMPLEMENTATION: Verify Service and Organization schema; look for FAQ opportunities.\n\n"
            "Quantify opportunities in terms of potential organic leads where possible."
        ),
        output_guidance=(
            "Provide specific, implementable recommendations:\n"
            "- Reference specific URLs and pages\n"
            "- Include exact schema markup fixes needed\n"
            "- Prioritize by lead generation impact"
        ),
        examples=(
            SEOExample(
                scenario="Service page missing trust signals",
                page_data=(
                    'URL: /services/commercial-plumbing - Position 12 for "commercial plumber [city]", '
                    "No reviews, No certifications displayed, 180 word description"
                ),
                recommendation=(
                    "Display the contractor license number, add 2-3 customer testimonials, and show "
                    "bonded/insured badges. Expand content to 500+ words."
                ),
                reasoning="Trust signals are decisive for service businesses choosing whom to contact.",
            ),
            SEOExample(
                scenario="Missing FAQ rich results opportunity",
                page_data='URL: /services/roof-repair - Position 7 for "roof repair", no FAQ section',
                recommendation="Add an FAQ section from real customer questions and implement FAQPage schema.",
                reasoning="FAQ rich results increase SERP real estate and answer pre-contact questions.",
            ),
        ),
        constraints=(
            "NEVER recommend Product schema - services are not products",
            "NEVER reference ROAS, revenue, or average order value",
            "Do not fabricate testimonials or credentials",
            "Location pages must have unique content, not city-name swaps",
        ),
    ),
    common_issues=CommonIssues(
        critical=(
            CommonIssue("missing-service-schema", "Service pages without Service structured data",
                        "Search engines cannot identify offered services",
                        "Implement Service schema with name, description, provider, areaServed"),
            CommonIssue("missing-phone-clicktocall", "Phone numbers not using tel: links",
                        "Mobile visitors cannot call in one tap",
                        'Wrap all phone numbers in <a href="tel:..."> links'),
        ),
        warnings=(
            CommonIssue("duplicate-location-pages", "Location pages with only city name differences",
                        "Thin duplicate content", "Create unique content for each location"),
        ),
        false_positives=(
            "Short pages for simple services - may be appropriate if comprehensive",
            "No LocalBusiness schema for national services - not always needed",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=("schema-implementation", "trust-signal", "content-expansion", "faq"),
            deprioritize=("site-architecture-overhaul", "cms-migration"),
            exclude=("product-schema", "shopping-feed"),
        ),
        max_recommendations=8,
    ),
)


LEAD_GEN_DIRECTOR_SKILL = DirectorSkillDefinition(
    version=VERSION,
    context=DirectorContext(
        business_priorities=(
            "Reduce cost per lead (CPL)",
            "Increase lead volume",
            "Improve lead quality",
            "Build trust and credibility",
        ),
        success_metrics=(
            "Total leads (paid + organic)",
            "Blended cost per lead",
            "Organic lead growth",
            "Lead conversion rate",
        ),
        executive_framing=(
            "Focus on lead volume and cost efficiency. Frame recommendations in terms of leads "
            "generated and cost per acquisition. More leads only matter if sales can handle them."
        ),
    ),
    synthesis=SynthesisConfig(
        conflict_resolution=(
            ConflictRule("paid-vs-organic-overlap", "Recommend maintaining spend on service keywords",
                         "Strong organic rankings for same service keywords",
                         "Test reduced paid spend where organic ranks top 3 and monitor total lead volume.",
                         "hybrid"),
            ConflictRule("landing-page-strategy", "Recommend dedicated PPC landing page with minimal navigation",
                         "Recommend comprehensive service page for organic ranking",
                         "Keep the comprehensive page for organic and a focused variant for paid traffic.",
                         "hybrid"),
        ),
        synergy_identification=(
            SynergyRule("keyword-content-alignment", "High-converting search queries identified in paid",
                        "Service pages lacking target phrasing",
                        "Use converting paid queries to shape service page headings and copy."),
            SynergyRule("faq-content-leverage", "Common questions appearing in search terms",
                        "FAQ content opportunity",
                        "Answer recurring search-term questions in FAQ sections with FAQPage schema."),
        ),
        prioritization=(
            PrioritizationRule("Recommendation fixes a lead capture blocker", "require", 1.0,
                               "Broken forms or missing phone links lose leads immediately"),
            PrioritizationRule("Recommendation reduces CPL by more than 30%", "boost", 1.8,
                               "Cost efficiency is the primary lead-gen lever"),
            PrioritizationRule("Recommendation mentions revenue or ROAS targets", "exclude", 0,
                               "Lead-gen performance is not measured in revenue"),
        ),
    ),
    filtering=FilteringConfig(
        max_recommendations=10,
        min_impact_threshold="medium",
        impact_weights=ImpactWeights(revenue=0.30, cost=0.30, effort=0.20, risk=0.20),
        must_include=("type:technical-fix",),
        must_exclude=(
            "metric:roas",
            "metric:revenue",
            "metric:aov",
            "metric:conversionValue",
            "schema:Product",
            "schema:Offer",
            "schema:AggregateOffer",
            "type:shopping-campaign",
            "type:merchant-center",
            "type:product-feed",
            "type:product-listing-ads",
        ),
    ),
    executive_summary=ExecutiveSummaryConfig(
        focus_areas=(
            "Lead volume growth opportunity",
            "Cost per lead optimization",
            "Trust and credibility building",
        ),
        metrics_to_quantify=(
            "Estimated additional leads per month",
            "Potential CPL reduction",
            "Conversion rate improvement targets",
        ),
        framing_guidance=(
            "Lead with the lead generation opportunity. Frame SEO improvements as reducing customer "
            "acquisition cost over time. Never express results as revenue or ROAS."
        ),
        max_highlights=5,
    ),
    prompt=DirectorPromptConfig(
        role_context=(
            "You are a senior digital marketing director synthesizing SEM and SEO recommendations for "
            "a lead generation business. Your role is to create a unified strategy that maximizes lead "
            "volume while reducing cost per lead. Leadership cares about pipeline growth and marketing "
            "efficiency - NOT about ROAS or revenue."
        ),
        synthesis_instructions=(
            "Review the SEM and SEO agent outputs and create a unified recommendation set:\n\n"
            "1. IDENTIFY SYNERGIES: PPC data informs content strategy; organic authority reduces paid costs.\n"
            "2. RESOLVE CONFLICTS: Decide based on lead volume and CPL impact.\n"
            "3. PRIORITIZE BY IMPACT: Quick wins that drive immediate leads surface first.\n"
            "4. CONSOLIDATE DUPLICATES: Merge similar recommendations into one."
        ),
        prioritization_guidance=(
            "Prioritization framework for lead generation: lead value, CPL efficiency, effort, and risk."
        ),
        output_format=(
            "EXECUTIVE SUMMARY: overview of the lead opportunity plus key highlights.\n"
            "UNIFIED RECOMMENDATIONS: title, type, impact, effort, description and 3-5 action items."
        ),
        constraints=(
            "NEVER mention ROAS, revenue, or average order value",
            "NEVER recommend Product schema, Shopping campaigns, or Merchant Center",
            "Account for sales capacity when recommending lead volume increases",
        ),
    ),
)


LEAD_GEN_SKILL_BUNDLE = AgentSkillBundle(
    business_type=BusinessType.LEAD_GEN,
    version=VERSION,
    scout=LEAD_GEN_SCOUT_SKILL,
    researcher=LEAD_GEN_RESEARCHER_SKILL,
    sem=LEAD_GEN_SEM_SKILL,
    seo=LEAD_GEN_SEO_SKILL,
    director=LEAD_GEN_DIRECTOR_SKILL,
)
