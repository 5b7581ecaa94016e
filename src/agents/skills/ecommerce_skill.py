"""
Ecommerce Skill Bundle

Online retail: revenue-driving keywords, product pages, ROAS efficiency,
Product schema and Shopping campaigns.
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


# ============================================================================
# Scout
# ============================================================================

ECOMMERCE_SCOUT_SKILL = ScoutSkillDefinition(
    version=VERSION,
    thresholds=ScoutThresholds(
        high_spend_threshold=500,
        low_roas_threshold=2.0,
        cannibalization_position=5,
        high_bounce_rate_threshold=0.65,
        low_ctr_threshold=0.015,
        min_impressions_for_analysis=100,
    ),
    priority_rules=ScoutPriorityRules(
        battleground_keywords=(
            PriorityRule(
                id="high-spend-low-roas",
                name="High Spend, Low ROAS",
                description="Keywords with significant spend but poor return on ad spend",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("spend", ">", threshold="high_spend_threshold"),
                    when("roas", "<", threshold="low_roas_threshold"),
                ),
            ),
            PriorityRule(
                id="cannibalization-risk",
                name="Paid/Organic Cannibalization",
                description="Paying for clicks on keywords where organic ranks well",
                priority=RulePriority.HIGH,
                conditions=(
                    when("organic_position", "<=", threshold="cannibalization_position"),
                    when("spend", ">", 100),
                ),
            ),
            PriorityRule(
                id="high-intent-low-conversion",
                name="High Intent, Low Conversion",
                description="Queries drawing clicks without converting",
                priority=RulePriority.HIGH,
                conditions=(
                    when("clicks", ">", 50),
                    when("conversions", "<", 2),
                ),
                reason="high_spend_low_roas",
            ),
            PriorityRule(
                id="growth-potential",
                name="Growth Opportunity",
                description="Keywords with good ROAS that could scale with more budget",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("roas", ">", 4),
                    when("conversions", ">", 5),
                ),
            ),
            PriorityRule(
                id="competitive-pressure",
                name="Competitive Pressure",
                description="Converting keywords with spend large enough to warrant auction review",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("spend", ">", threshold="high_spend_threshold", multiplier=0.75),
                    when("conversions", ">", 5),
                ),
            ),
        ),
        critical_pages=(
            PriorityRule(
                id="high-spend-no-organic",
                name="Paid Dependency",
                description="Landing pages with paid spend and no organic presence",
                priority=RulePriority.CRITICAL,
                conditions=(
                    when("paid_spend", ">", 300),
                    when("organic_position", "is_null"),
                ),
                reason="high_spend_low_organic",
            ),
            PriorityRule(
                id="high-spend-low-organic",
                name="Poor Organic Visibility",
                description="Pages receiving paid traffic while ranking beyond page one",
                priority=RulePriority.HIGH,
                conditions=(
                    when("paid_spend", ">", 300),
                    when("organic_position", ">", 10),
                ),
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
                id="category-page-opportunity",
                name="Listing CTR Opportunity",
                description="Pages with many impressions and a weak organic click-through rate",
                priority=RulePriority.MEDIUM,
                conditions=(
                    when("impressions", ">", 1000),
                    when("ctr", "<", threshold="low_ctr_threshold"),
                ),
                reason="high_impressions_low_ctr",
            ),
        ),
    ),
    metrics=ScoutMetricsConfig(
        include=(
            "spend", "revenue", "roas", "conversions", "conversionValue", "ctr",
            "cpc", "impressions", "impressionShare", "position", "bounceRate", "aov",
        ),
        primary=("roas", "revenue", "conversions"),
    ),
    limits=ScoutLimits(max_battleground_keywords=25, max_critical_pages=15),
)


# ============================================================================
# Researcher
# ============================================================================

ECOMMERCE_RESEARCHER_SKILL = ResearcherSkillDefinition(
    version=VERSION,
    keyword_enrichment=KeywordEnrichmentConfig(
        competitive_metrics=CompetitiveMetricsConfig(
            required=("impressionShare", "lostImpressionShareRank", "lostImpressionShareBudget"),
            optional=("topOfPageRate", "absTopOfPageRate", "overlapRate", "outrankingShare", "positionAboveRate"),
        ),
        priority_boosts=(
            PriorityBoost.from_condition(
                "impressionShare", "< 30", 2,
                "High-converting keyword with significant market share opportunity",
            ),
            PriorityBoost.from_condition(
                "lostImpressionShareBudget", "> 40", 1.5, "Profitable keyword limited by budget",
            ),
            PriorityBoost.from_condition(
                "topOfPageRate", "< 50", 1.3, "Product query not achieving top positions",
            ),
        ),
    ),
    page_enrichment=PageEnrichmentConfig(
        schema_extraction=SchemaExtractionConfig(
            look_for=(
                "Product", "Offer", "AggregateOffer", "AggregateRating", "Review",
                "BreadcrumbList", "Organization", "WebSite",
            ),
            flag_if_present=("Article", "NewsArticle"),
            flag_if_missing=("Product", "BreadcrumbList"),
        ),
        content_signals=(
            ContentSignal(
                id="price-display", name="Price Display",
                selector='[class*="price"], [data-price], .product-price',
                importance="critical", description="Product price visibility",
                business_context="Clear pricing is essential for ecommerce conversion",
            ),
            ContentSignal(
                id="add-to-cart", name="Add to Cart Button",
                selector='[class*="add-to-cart"], [data-action="add-to-cart"], .add-to-cart',
                importance="critical", description="Primary conversion action",
                business_context="Must be prominent and functional",
            ),
            ContentSignal(
                id="product-images", name="Product Images",
                selector='.product-image, .product-gallery, [class*="product-photo"]',
                importance="high", description="Product imagery presence",
                business_context="Visual content critical for purchase decisions",
            ),
            ContentSignal(
                id="reviews-section", name="Customer Reviews",
                selector='.reviews, [class*="review"], .customer-reviews',
                importance="high", description="Social proof presence",
                business_context="Reviews significantly impact conversion rates",
            ),
            ContentSignal(
                id="stock-status", name="Stock Availability",
                selector='[class*="stock"], [class*="availability"], .in-stock',
                importance="medium", description="Inventory status display",
            ),
            ContentSignal(
                id="shipping-info", name="Shipping Information",
                selector='[class*="shipping"], [class*="delivery"], .shipping-info',
                importance="medium", description="Delivery information visibility",
            ),
        ),
        page_classification=PageClassificationConfig(
            patterns=(
                PageClassificationPattern(r"/product/|/p/|/item/|/shop/.+/.+", "product", "Product detail page", 0.9),
                PageClassificationPattern(r"/category/|/c/|/collection/|/shop/?$", "category", "Category or collection page", 0.85),
                PageClassificationPattern(r"/cart|/basket|/shopping-cart", "cart", "Shopping cart page", 0.95),
                PageClassificationPattern(r"/checkout|/order|/payment", "checkout", "Checkout flow page", 0.95),
                PageClassificationPattern(r"/search|/results|\?q=|\?search=", "search", "Search results page", 0.9),
                PageClassificationPattern(r"/brand/|/brands/", "brand", "Brand landing page", 0.85),
                PageClassificationPattern(r"/sale|/clearance|/deals|/offers", "promotion", "Promotional landing page", 0.8),
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


# ============================================================================
# SEM
# ============================================================================

ECOMMERCE_SEM_SKILL = SEMSkillDefinition(
    version=VERSION,
    context=SEMContext(
        business_model=(
            "Online retail business selling products directly to consumers. Revenue is generated "
            "through product sales, with success measured by transaction volume, average order "
            "value, and return on ad spend."
        ),
        conversion_definition=(
            "A conversion is a completed purchase transaction. Conversion value represents the "
            "order total. Secondary conversions include add-to-cart events and checkout initiations."
        ),
        typical_customer_journey=(
            "Awareness (display/social) -> Research (generic searches) -> Consideration "
            "(product-specific searches, comparisons) -> Purchase (brand/product searches, "
            "Shopping ads) -> Repeat (remarketing, email)"
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition(
                "roas", "critical", "Return on Ad Spend - revenue generated per dollar spent", "higher",
                "Primary efficiency metric. Target ROAS varies by margin. Below 2x is typically unprofitable.",
                benchmark=4.0,
            ),
            KPIDefinition(
                "revenue", "critical", "Total revenue attributed to paid search", "higher",
                "Top-line growth metric. Balance against ROAS.",
            ),
            KPIDefinition(
                "conversionValue", "critical", "Total value of conversions", "higher",
                "Used in bidding strategies and performance evaluation.",
            ),
        ),
        secondary=(
            KPIDefinition(
                "conversions", "high", "Number of completed transactions", "higher",
                "Volume metric. High conversions with low value may indicate discount-driven sales.",
            ),
            KPIDefinition(
                "aov", "high", "Average Order Value", "higher",
                "Increasing AOV improves efficiency of acquisition spend.", benchmark=75,
            ),
            KPIDefinition(
                "ctr", "medium", "Click-through rate", "higher",
                "Ad relevance indicator. Low CTR suggests poor ad copy or targeting.", benchmark=0.02,
            ),
            KPIDefinition(
                "impressionShare", "medium", "Share of available impressions captured", "higher",
                "Low share on high-ROAS keywords indicates growth opportunity.",
            ),
        ),
        irrelevant=("cpl", "leadQuality", "mrr", "ltv"),
    ),
    benchmarks={
        "ctr": ThresholdSet(0.04, 0.025, 0.015, 0.008),
        "conversionRate": ThresholdSet(0.04, 0.025, 0.015, 0.008),
        "cpc": ThresholdSet(0.5, 1.0, 1.5, 2.5),
        "roas": ThresholdSet(6.0, 4.0, 2.5, 1.5),
        "costPerConversion": ThresholdSet(15, 25, 40, 60),
    },
    analysis=SEMAnalysisConfig(
        key_patterns=(
            AnalysisPattern(
                "shopping-dominance", "Shopping Campaign Success", "Shopping campaigns outperforming text ads",
                ("Shopping ROAS > Search ROAS", "Shopping conversion rate higher", "Lower CPC on Shopping"),
                "Shift budget toward Shopping campaigns for product-specific queries",
            ),
            AnalysisPattern(
                "brand-efficiency", "Brand Term Efficiency", "Brand campaigns showing strong performance",
                ("Brand ROAS > 10", "High conversion rate on brand terms", "Low CPC"),
                "Evaluate organic brand visibility - may be able to reduce brand spend",
            ),
            AnalysisPattern(
                "category-expansion", "Category Expansion Opportunity", "Strong category performance with room to grow",
                ("Good ROAS on category terms", "Low impression share", "Competitors bidding aggressively"),
                "Increase budget and bids on performing category keywords",
            ),
            AnalysisPattern(
                "remarketing-value", "Remarketing High Value", "Remarketing lists showing strong returns",
                ("RLSA ROAS significantly higher than standard", "Cart abandoner conversions"),
                "Expand remarketing lists and increase bid adjustments",
            ),
        ),
        anti_patterns=(
            AnalysisPattern(
                "broad-match-bleed", "Broad Match Budget Bleed", "Broad match capturing irrelevant traffic",
                ("High spend on broad match", "Low conversion rate vs exact/phrase", "Many irrelevant search terms"),
                "Tighten match types and add negatives",
            ),
            AnalysisPattern(
                "geographic-waste", "Geographic Inefficiency", "Spending in non-converting regions",
                ("Low conversion rate in specific geos", "No shipping to some targeted areas"),
                "Review geographic targeting, add location exclusions",
            ),
            AnalysisPattern(
                "mobile-mismatch", "Mobile Experience Gap", "Mobile traffic not converting",
                ("High mobile impressions", "Low mobile conversion rate"),
                "Audit mobile site experience, consider mobile bid adjustments",
            ),
        ),
        opportunities=(
            Opportunity(
                "pmax-adoption", "Performance Max campaign opportunity",
                ("Strong Shopping performance", "Good product feed quality"),
                "Test Performance Max campaign with best-performing products",
            ),
            Opportunity(
                "feed-optimization", "Product feed improvement opportunity",
                ("Low Shopping impression share", "Missing product attributes"),
                "Optimize product titles, descriptions, and attributes",
            ),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert ecommerce PPC strategist analyzing Google Ads performance for an "
            "online retail business. Your recommendations should focus on maximizing return on ad "
            "spend (ROAS) while growing profitable revenue. You understand the nuances of Shopping "
            "campaigns, product feed optimization, and the ecommerce customer journey."
        ),
        analysis_instructions=(
            "Analyze the provided keyword and campaign data with these priorities:\n\n"
            "1. ROAS OPTIMIZATION: Identify keywords and campaigns with below-target ROAS that are "
            "dragging down overall performance.\n\n"
            "2. REVENUE GROWTH: Find opportunities to scale profitable keywords by increasing "
            "impression share.\n\n"
            "3. SHOPPING vs SEARCH: Evaluate the balance between Shopping and Search campaigns.\n\n"
            "4. COMPETITIVE POSITION: Assess impression share and auction insights to understand "
            "market position.\n\n"
            "5. KEYWORD EFFICIENCY: Analyze match type performance.\n\n"
            "For each issue identified, quantify the potential impact in terms of revenue or cost savings."
        ),
        output_guidance=(
            "Structure recommendations as specific, actionable items:\n"
            "- Lead with the business impact (revenue opportunity or cost savings)\n"
            "- Specify exact keywords, campaigns, or settings to change\n"
            "- Provide benchmarks or targets for success\n\n"
            "Prioritize recommendations by potential revenue impact."
        ),
        examples=(
            SEMExample(
                scenario="High-spend keyword with poor ROAS",
                data='Keyword "wireless headphones" - $2,400/month spend, 1.2 ROAS, 2.1% CTR, $45 CPC',
                recommendation=(
                    'Reduce bids on "wireless headphones" by 30% or pause and reallocate to Shopping '
                    "campaigns where this category shows 3.8 ROAS. Estimated monthly savings: $800-1,000."
                ),
                reasoning=(
                    "Generic product terms often perform better on Shopping where visual ads and "
                    "pricing drive purchase intent."
                ),
            ),
            SEMExample(
                scenario="Strong performer limited by budget",
                data='Keyword "buy nike air max" - $500/month spend, 6.2 ROAS, 45% impression share lost to budget',
                recommendation=(
                    'Increase daily budget to capture the additional 45% impression share on "buy nike '
                    'air max". At current ROAS, an additional $500/month could generate $3,100 in revenue.'
                ),
                reasoning="High-intent purchase queries with strong ROAS should capture maximum available traffic.",
            ),
        ),
        constraints=(
            "Always recommend ROAS targets appropriate for the product category",
            "Consider that some low-ROAS keywords may be necessary for brand awareness",
            "Account for Shopping campaign dynamics when analyzing product keywords",
            "Do not recommend pausing campaigns without suggesting reallocation",
            "Factor in seasonality - Q4 may justify higher spend at lower ROAS",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=(
                "budget-reallocation", "bid-optimization", "shopping-expansion",
                "negative-keywords", "audience-targeting",
            ),
            deprioritize=("brand-campaign-changes", "complete-restructure"),
            exclude=("platform-migration", "attribution-model-change"),
        ),
        max_recommendations=8,
        require_quantified_impact=True,
    ),
)


# ============================================================================
# SEO
# ============================================================================

ECOMMERCE_SEO_SKILL = SEOSkillDefinition(
    version=VERSION,
    context=SEOContext(
        site_type=(
            "Ecommerce website with product catalog, category pages, and transactional intent. "
            "Success is measured by organic revenue, product page visibility, and category rankings."
        ),
        primary_goal=(
            "Drive organic traffic that converts to purchases. Optimize product pages for "
            "transactional queries and category pages for broader discovery."
        ),
        content_strategy=(
            "Product-focused content with detailed descriptions, specifications, and user reviews. "
            "Category pages serve as landing pages for broader queries."
        ),
    ),
    schema=SEOSchemaConfig(
        required=(
            SchemaRule("Product", "Product structured data with price, availability, reviews", "required",
                       "Must include name, image, price, priceCurrency, availability."),
            SchemaRule("BreadcrumbList", "Navigation breadcrumb trail", "required",
                       "Should reflect actual site hierarchy."),
            SchemaRule("Organization", "Company/brand information", "required",
                       "Include on homepage with logo, name, and contact info."),
        ),
        recommended=(
            SchemaRule("AggregateRating", "Average product rating from reviews", "recommended",
                       "Requires actual reviews - do not fake."),
            SchemaRule("Review", "Individual product reviews", "recommended"),
            SchemaRule("Offer", "Product offer/pricing details", "recommended",
                       "Nested within Product."),
            SchemaRule("FAQPage", "Product or category FAQ", "optional",
                       "Do not fabricate questions."),
        ),
        invalid=(
            SchemaRule("Article", "Article schema on product pages", "required",
                       "Product pages should use Product schema, not Article."),
            SchemaRule("LocalBusiness", "Local business schema on product pages", "required",
                       "Use Organization for ecommerce."),
        ),
        page_type_rules=(
            PageTypeSchemaRule("product", ("Product", "BreadcrumbList"), ("AggregateRating", "Review", "Offer"),
                               ("Article", "LocalBusiness", "NewsArticle")),
            PageTypeSchemaRule("category", ("BreadcrumbList",), ("ItemList", "CollectionPage"), ("Product", "Article")),
        ),
    ),
    kpis=KPIConfig(
        primary=(
            KPIDefinition("organicRevenue", "critical", "Revenue attributed to organic search traffic",
                          "higher", "Ultimate success metric."),
            KPIDefinition("organicTransactions", "critical", "Number of purchases from organic search",
                          "higher", "Volume counterpart to revenue."),
            KPIDefinition("productPageVisibility", "critical", "Average position of product pages",
                          "lower", "Product pages should rank on page 1 for their primary keywords.",
                          benchmark=10),
        ),
        secondary=(
            KPIDefinition("organicCtr", "high", "Click-through rate from search results", "higher",
                          "Rich results improve CTR.", benchmark=0.03),
            KPIDefinition("indexedProductPages", "high", "Number of product pages in Google index",
                          "higher", "All in-stock products should be indexed."),
        ),
        irrelevant=("leadGeneration", "formSubmissions", "phoneCallsFromSearch"),
    ),
    benchmarks={
        "organicCtr": ThresholdSet(0.05, 0.03, 0.02, 0.01),
        "bounceRate": ThresholdSet(0.35, 0.45, 0.55, 0.70),
        "avgPosition": ThresholdSet(5, 10, 20, 35),
        "pageLoadTime": ThresholdSet(1.5, 2.5, 4.0, 6.0),
    },
    analysis=SEOAnalysisConfig(
        content_patterns=(
            ContentPattern(
                "thin-product-content", "Thin Product Descriptions",
                "Product descriptions with 200+ words, unique content, specifications, use cases",
                "Manufacturer descriptions only, under 100 words, duplicate across variants",
                "Expand product descriptions with unique value propositions and detailed specifications.",
            ),
            ContentPattern(
                "missing-category-content", "Category Page Content Gap",
                "Category pages with intro content, buying guides, filter explanations",
                "Category pages with only product listings, no contextual content",
                "Add 150-300 words of category-relevant content above or below product listings.",
            ),
        ),
        technical_checks=(
            TechnicalCheck("faceted-navigation", "Faceted Navigation Control", "critical",
                           "Filter combinations creating duplicate/thin pages that dilute crawl budget"),
            TechnicalCheck("canonical-tags", "Canonical Implementation", "critical",
                           "Product variants, sorted views, and filtered pages need proper canonicals"),
            TechnicalCheck("core-web-vitals", "Core Web Vitals", "high",
                           "LCP, INP, CLS scores impact rankings and user experience"),
        ),
        on_page_factors=(
            OnPageFactor("title-tag", "critical",
                         'Format: "Product Name - Category | Brand". Keep under 60 characters.'),
            OnPageFactor("meta-description", "high",
                         "Include price, key features, and call-to-action. 150-160 characters."),
            OnPageFactor("h1-tag", "critical", "One H1 per page, should be the product name."),
        ),
    ),
    prompt=AgentPromptConfig(
        role_context=(
            "You are an expert ecommerce SEO strategist analyzing organic search performance for an "
            "online retail website. Your recommendations should focus on improving product page "
            "visibility, category rankings, and organic revenue."
        ),
        analysis_instructions=(
            "Analyze the provided page data with these priorities:\n\n"
            "1. PRODUCT PAGE OPTIMIZATION: Assess product pages for content quality, schema markup, "
            "and on-page SEO factors.\n\n"
            "2. CATEGORY ARCHITECTURE: Evaluate category page structure, internal linking, and content.\n\n"
            "3. TECHNICAL HEALTH: Check for crawlability issues, duplicate content from filters, "
            "canonical implementation, and Core Web Vitals.\n\n"
            "4. SCHEMA IMPLEMENTATION: Verify Product schema with required properties.\n\n"
            "Quantify opportunities in terms of potential traffic or revenue impact where possible."
        ),
        output_guidance=(
            "Provide specific, implementable recommendations:\n"
            "- Reference specific URLs and pages\n"
            "- Include exact schema markup fixes needed\n"
            "- Prioritize by traffic/revenue impact"
        ),
        examples=(
            SEOExample(
                scenario="Product page missing rich results",
                page_data=(
                    'URL: /products/wireless-earbuds-pro - Position 8 for "wireless earbuds", '
                    "No Product schema, 85 word description"
                ),
                recommendation=(
                    "Implement Product schema with price, availability, and aggregateRating. Expand "
                    "the product description to 200+ words. Rich results could improve CTR by 30%."
                ),
                reasoning="Product schema enables rich results showing price and ratings directly in SERPs.",
            ),
            SEOExample(
                scenario="Category page with thin content",
                page_data='URL: /category/headphones - Position 15 for "headphones", 0 words above fold',
                recommendation=(
                    "Add a 200-300 word intro covering headphone types and buying guidance, with "
                    "internal links to subcategories."
                ),
                reasoning="Category pages with contextual content outrank pure product listing pages.",
            ),
        ),
        constraints=(
            "Product schema must accurately reflect actual product data - never recommend faking reviews or ratings",
            "Consider crawl budget implications for large catalogs",
            "Faceted navigation recommendations must balance UX and SEO",
            "Account for product availability - out of stock pages need different handling",
        ),
    ),
    common_issues=CommonIssues(
        critical=(
            CommonIssue("missing-product-schema", "Product pages without Product structured data",
                        "Prevents rich results and reduces click-through rate",
                        "Implement Product schema with name, image, price, priceCurrency, availability"),
            CommonIssue("duplicate-content-filters", "Multiple URLs for same content via filter parameters",
                        "Dilutes page authority and wastes crawl budget",
                        "Implement canonical tags or noindex for filter combinations"),
        ),
        warnings=(
            CommonIssue("thin-product-descriptions", "Product descriptions under 100 words",
                        "Limited ranking potential", "Expand with unique content and specifications"),
        ),
        false_positives=(
            "Out of stock products with noindex - this is often intentional",
            "Product variants on same URL - may be valid UX choice",
        ),
    ),
    output=AgentOutputConfig(
        recommendation_types=RecommendationTypes(
            prioritize=(
                "schema-implementation", "content-expansion", "technical-fix",
                "internal-linking", "page-speed",
            ),
            deprioritize=("site-architecture-overhaul", "cms-migration"),
            exclude=("link-building", "ppc-recommendations"),
        ),
        max_recommendations=8,
    ),
)


# ============================================================================
# Director
# ============================================================================

ECOMMERCE_DIRECTOR_SKILL = DirectorSkillDefinition(
    version=VERSION,
    context=DirectorContext(
        business_priorities=(
            "Maximize return on ad spend (ROAS)",
            "Grow profitable revenue",
            "Reduce wasted ad spend",
            "Improve organic visibility for product pages",
        ),
        success_metrics=(
            "Total revenue (paid + organic)",
            "Blended ROAS",
            "Organic traffic growth",
            "Cost savings from optimization",
        ),
        executive_framing=(
            "Focus on revenue impact and ROI. Ecommerce leadership wants to see dollar amounts - "
            "potential revenue gains, cost savings, and efficiency improvements."
        ),
    ),
    synthesis=SynthesisConfig(
        conflict_resolution=(
            ConflictRule(
                "paid-vs-organic-cannibalization",
                "Recommend maintaining spend on branded/product keywords",
                "Strong organic rankings for same keywords",
                "Test reducing paid spend incrementally on keywords ranking #1-3 organically.",
                "hybrid",
            ),
            ConflictRule(
                "landing-page-conflict",
                "Recommend dedicated PPC landing page",
                "Recommend optimizing existing product/category page",
                "Use existing page for organic, create a PPC variant only if conversion rate justifies it.",
                "hybrid",
            ),
        ),
        synergy_identification=(
            SynergyRule(
                "search-data-sharing",
                "High-converting search queries identified",
                "Content gaps in product descriptions",
                "Use converting PPC search terms to inform product page content.",
            ),
            SynergyRule(
                "schema-rich-results",
                "Product ads showing price and reviews",
                "Product schema implementation needed",
                "Implement Product schema to get organic rich results matching paid ad format.",
            ),
        ),
        prioritization=(
            PrioritizationRule("Recommendation has quantified revenue impact > $5,000/month", "boost", 2.0,
                               "High revenue impact prioritized for ecommerce"),
            PrioritizationRule("Recommendation requires development resources", "reduce", 0.7,
                               "Development dependency may delay implementation"),
            PrioritizationRule("Recommendation affects checkout flow", "require", 1.0,
                               "Checkout issues directly impact revenue"),
            PrioritizationRule("Recommendation is purely cosmetic", "exclude", 0,
                               "Focus on performance-impacting changes"),
        ),
    ),
    filtering=FilteringConfig(
        max_recommendations=10,
        min_impact_threshold="medium",
        impact_weights=ImpactWeights(revenue=0.35, cost=0.25, effort=0.20, risk=0.20),
        must_include=("schema:Product",),
        must_exclude=("schema:ProfessionalService", "schema:LocalBusiness", "type:lead-form"),
    ),
    executive_summary=ExecutiveSummaryConfig(
        focus_areas=(
            "Revenue opportunity from paid search optimization",
            "Cost savings from efficiency improvements",
            "Organic traffic growth potential",
        ),
        metrics_to_quantify=(
            "Estimated monthly revenue impact",
            "Potential cost savings",
            "ROAS improvement targets",
        ),
        framing_guidance=(
            "Lead with the total revenue opportunity. Frame SEO improvements as free traffic that "
            "reduces customer acquisition cost."
        ),
        max_highlights=5,
    ),
    prompt=DirectorPromptConfig(
        role_context=(
            "You are a senior digital marketing director synthesizing SEM and SEO recommendations "
            "for an ecommerce business. Your role is to create a unified strategy that maximizes "
            "revenue while efficiently allocating resources between paid and organic channels."
        ),
        synthesis_instructions=(
            "Review the SEM and SEO agent outputs and create a unified recommendation set:\n\n"
            "1. IDENTIFY SYNERGIES: Find where paid and organic can reinforce each other.\n"
            "2. RESOLVE CONFLICTS: When recommendations conflict, determine the best allocation "
            "based on ROI timeline and business goals.\n"
            "3. PRIORITIZE BY IMPACT: Rank recommendations by revenue impact.\n"
            "4. CONSOLIDATE DUPLICATES: Merge similar recommendations into one."
        ),
        prioritization_guidance=(
            "Prioritization framework for ecommerce: revenue impact, cost savings, effort required, "
            "and risk. Score each recommendation and present in priority order."
        ),
        output_format=(
            "EXECUTIVE SUMMARY: a 2-3 sentence overview of the total opportunity plus key highlights.\n"
            "UNIFIED RECOMMENDATIONS: title, type, impact, effort, description and 3-5 action items, "
            "ordered by priority."
        ),
        constraints=(
            "Do not recommend major platform migrations or CMS changes",
            "Keep recommendations actionable within current toolset",
            "Quantify impact in revenue/cost terms where data supports it",
        ),
    ),
)


ECOMMERCE_SKILL_BUNDLE = AgentSkillBundle(
    business_type=BusinessType.ECOMMERCE,
    version=VERSION,
    scout=ECOMMERCE_SCOUT_SKILL,
    researcher=ECOMMERCE_RESEARCHER_SKILL,
    sem=ECOMMERCE_SEM_SKILL,
    seo=ECOMMERCE_SEO_SKILL,
    director=ECOMMERCE_DIRECTOR_SKILL,
)
