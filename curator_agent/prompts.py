"""Relevance Curator - Prompt

One request: filter the sampled batch down to stories with a direct link to
the business, then attach an angle and a content plan to each survivor.
Content types and audiences are rendered from the enums in news_hooks.models,
which the parser validates against.
"""

BUSINESS_CONTEXT = """\
Glossi is the first AI-native 3D product visualization platform.
- Core tech: compositing, not generation. The product's 3D asset stays untouched;
  AI generates the scene around it.
- Built on Unreal Engine 5, runs in the browser.
- Target customers: enterprise brands, e-commerce, CPG, fashion, beauty.
- Key value: ~80% reduction in product photo costs, unlimited variations,
  brand consistency across every channel.
"""

INCLUDE_TOPICS = [
    "Generative AI for images, video or 3D (models, tools, funding, launches)",
    "3D rendering, real-time engines (Unreal, Unity), digital twins, CAD",
    "Product photography, visual content production, creative automation",
    "E-commerce and retail technology, visual merchandising, online conversion",
    "Brand marketing technology, ad creative, content supply chain",
    "Fashion, beauty and CPG digital transformation",
    "Enterprise AI adoption in marketing and creative teams",
    "Funding, M&A and earnings of direct competitors or adjacent platforms",
]

EXCLUDE_TOPICS = [
    "General consumer gadgets and phone/laptop reviews",
    "Politics, elections and regulation with no creative/commerce angle",
    "Crypto, gaming culture and entertainment gossip",
    "Cybersecurity incidents, outages and layoffs unrelated to creative tooling",
    "Chip/hardware supply chain and semiconductors",
    "Generic LLM chatbot news with no visual or commerce application",
]

CURATOR_SYSTEM_PROMPT = """\
You are a strategic communications analyst for an early-stage startup.
You read industry news and decide which stories give the company a credible
reason to speak up, and how. Return ONLY valid JSON, no prose, no markdown.
"""

CURATOR_USER_TEMPLATE = """\
Today is {today}.

═══════════════════════════════════════════════════
COMPANY CONTEXT
═══════════════════════════════════════════════════
{business_context}
{talking_points_block}
═══════════════════════════════════════════════════
SELECTION RULES
═══════════════════════════════════════════════════
Include ONLY articles directly about one of these topics:
{include_topics}

Exclude articles about:
{exclude_topics}

Return between {min_items} and {max_items} articles. If fewer than {min_items}
articles qualify, return only the ones that do. Never pad with weak matches.

═══════════════════════════════════════════════════
PER ARTICLE
═══════════════════════════════════════════════════
- headline: the original article title
- outlet: the SOURCE domain exactly as given
- date: YYYY-MM-DD (use the DATE given)
- url: the original URL
- summary: ONE sentence
- relevance: ONE sentence on why this matters to the company
- angleTitle: a short (max 8 words) angle the company can own
- angleNarrative: 2-3 sentences connecting the story to the company
- contentPlan: ordered list of deliverables, each
  {{"type": <content type>, "description": <one line>, "priority": <1 = do first>, "audience": <audience>}}

Content types (use these exact tags): {content_types}
Audiences (use these exact tags): {audiences}

Scale the plan to the story: 3-5 deliverables for urgent, highly relevant
stories (direct competitor move, major funding, category-defining launch),
1-2 for marginal ones. Vary the content types across the batch. Do NOT give
every article the same social_post + blog_post pair; use quick_reaction,
investor_note, press_pitch, briefing_doc and the others where they fit.

═══════════════════════════════════════════════════
ARTICLES ({n_batch})
═══════════════════════════════════════════════════
{batch_text}

═══════════════════════════════════════════════════
OUTPUT FORMAT
═══════════════════════════════════════════════════
{{
  "news": [
    {{
      "headline": "...",
      "outlet": "...",
      "date": "YYYY-MM-DD",
      "url": "...",
      "summary": "...",
      "relevance": "...",
      "angleTitle": "...",
      "angleNarrative": "...",
      "contentPlan": [
        {{"type": "quick_reaction", "description": "...", "priority": 1, "audience": "press"}}
      ]
    }}
  ]
}}
Sort by date, most recent first.
"""

TALKING_POINTS_TEMPLATE = """
═══════════════════════════════════════════════════
CURRENT TALKING POINTS (use for framing, do not quote verbatim)
═══════════════════════════════════════════════════
{talking_points}
"""
