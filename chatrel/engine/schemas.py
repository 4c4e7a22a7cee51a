"""
Structured-output schemas and prompt templates sent to the inference service.

The schemas constrain what the model is asked to produce; they are not
trusted. Every payload is validated again against the pydantic models in
``chatrel.models.analysis`` by the response normalizer.
"""

ANALYSIS_SCHEMA_NAME = "relationship_analysis"
QUICK_SCAN_SCHEMA_NAME = "quick_scan"

ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "relationshipType": {
            "type": "string",
            "enum": ["Friends", "Family", "Crush", "Couple", "Unknown"],
            "description": "The classified relationship type based on the chat content.",
        },
        "typeConfidence": {
            "type": "number",
            "description": "Confidence score for the relationship type (0-100).",
        },
        "healthScore": {
            "type": "number",
            "description": "Overall relationship health score (0-100).",
        },
        "subscores": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "description": "e.g. Emotional Tone, Responsiveness, Engagement",
                    },
                    "score": {"type": "number", "description": "Score 0-100"},
                    "reasoning": {
                        "type": "string",
                        "description": "Brief explanation for this score",
                    },
                },
                "required": ["category", "score", "reasoning"],
            },
        },
        "sentimentTimeline": {
            "type": "array",
            "description": "10-20 data points tracing the emotional journey of the conversation.",
            "items": {
                "type": "object",
                "properties": {
                    "index": {"type": "number", "description": "Relative time/index (0-100)"},
                    "sentiment": {
                        "type": "number",
                        "description": "Sentiment from -100 (negative) to 100 (positive)",
                    },
                    "label": {
                        "type": "string",
                        "description": "Very brief (2-3 words) label for this moment",
                    },
                },
                "required": ["index", "sentiment", "label"],
            },
        },
        "wordCloud": {
            "type": "array",
            "description": "Top 15-20 most significant words, topics, or emojis used in the chat.",
            "items": {
                "type": "object",
                "properties": {
                    "word": {"type": "string"},
                    "count": {
                        "type": "number",
                        "description": "Relative importance/frequency (1-10)",
                    },
                },
                "required": ["word", "count"],
            },
        },
        "keyInsights": {
            "type": "array",
            "items": {"type": "string"},
            "description": "3-5 key qualitative insights about the relationship dynamic.",
        },
        "summary": {
            "type": "string",
            "description": "A concise executive summary of the relationship analysis.",
        },
        "participants": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Names or identifiers of the two participants.",
        },
    },
    "required": [
        "relationshipType",
        "healthScore",
        "subscores",
        "sentimentTimeline",
        "wordCloud",
        "keyInsights",
        "summary",
    ],
}


QUICK_SCAN_SCHEMA = {
    "type": "object",
    "properties": {
        "sentiment": {
            "type": "string",
            "enum": ["Positive", "Neutral", "Negative", "Mixed"],
        },
        "topic": {
            "type": "string",
            "description": "Main topic of the conversation in a few words.",
        },
        "quickSummary": {
            "type": "string",
            "description": "One-sentence summary of the conversation.",
        },
    },
    "required": ["sentiment", "topic", "quickSummary"],
}


DEEP_ANALYSIS_PROMPT = """You are ChatREL v5, an expert relationship analyst AI.
Analyze the following chat log between two people.

Determine the relationship type, health score, and provide deep insights.

CRITICAL:
1. Create a 'sentimentTimeline' of 10-20 points that maps the emotional flow of the conversation from start to finish.
2. Generate a 'wordCloud' of 15-20 significant terms, topics, or emojis that define their dynamic.
3. Analyze interaction timing, sentiment, and engagement markers.
4. All scores are numbers: healthScore, typeConfidence and subscore scores in 0-100, sentiment in -100..100.

Respond with a single JSON object matching the requested schema and nothing else.

CHAT LOG:
{transcript}"""


QUICK_SCAN_PROMPT = """Give a quick pulse check of this chat log.
Return JSON with the overall sentiment (Positive, Neutral, Negative or Mixed),
the main topic, and a one-sentence summary.

CHAT LOG:
{transcript}"""


CHAT_SYSTEM_PROMPT = """You are the ChatREL v5 AI assistant. You have access to a chat log analysis provided by the user.
Answer questions about the specific relationship dynamics, health scores, or nuances found in the text.
Be helpful, objective, and empathetic but professional.

CONTEXT (The chat log being analyzed):
{transcript}"""


WELCOME_MESSAGE = (
    "Hi! I've analyzed the chat log. Ask me anything about the relationship "
    "dynamics, tone, or specific interactions."
)


EXAMPLE_TRANSCRIPT = """[12/10/23, 09:15:22] Alice: Hey! Are we still on for tonight? 🌮
[12/10/23, 09:45:10] Bob: Oh hey. Um, actually works been crazy. Might need to raincheck.
[12/10/23, 09:46:05] Alice: Oh. That's the third time this month... is everything okay?
[12/10/23, 10:15:30] Bob: Yeah, just busy. Sorry.
[12/10/23, 10:16:00] Alice: OK. Let me know when you're free then.
[12/10/23, 21:00:00] Bob: Hey, sorry about earlier. I feel bad. Free for a call?
[12/10/23, 21:02:15] Alice: Sure."""
