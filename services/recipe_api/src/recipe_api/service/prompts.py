"""Hindi prompt template for recipe generation."""

CHEF_ROLE = "आप एक पेशेवर शेफ हैं।"

RECIPE_INSTRUCTIONS = (
    "सबसे पहले आवश्यक सामग्री की सूची लिखें।",
    "फिर बनाने की विधि को क्रमबद्ध चरणों में समझाएँ।",
    "सरल, साफ और आसानी से समझ आने वाली भाषा का प्रयोग करें।",
    "आउटपुट सिर्फ हिंदी में होना चाहिए।",
)


def build_recipe_prompt(recipe_name: str) -> str:
    """Wrap the user's request verbatim in the fixed chef instructions."""
    lines = [
        CHEF_ROLE,
        f'उपयोगकर्ता ने पूछा है: "{recipe_name}"।',
        "कृपया इस रेसिपी को **पूरी तरह हिंदी में** स्टेप-बाय-स्टेप विस्तार से बताइए।",
    ]
    lines.extend(f"{i}. {clause}" for i, clause in enumerate(RECIPE_INSTRUCTIONS, 1))
    return "\n".join(lines) + "\n"
