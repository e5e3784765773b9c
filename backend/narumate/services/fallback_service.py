"""
Canned assistant replies used when generation fails.

Buckets are checked in order; the first whose keywords appear in the
input wins, and a reply is drawn from it with the supplied random source.
"""
import random
from typing import Optional
from narumate.core.utils import contains_any

MOOD_KEYWORDS = ("feel", "mood", "emotion")
STORY_KEYWORDS = ("story", "narrative", "plot")
VOICE_KEYWORDS = ("voice", "narration", "script")
CONTENT_KEYWORDS = ("content", "create", "write")
HELP_KEYWORDS = ("help", "how", "what")

MOOD_RESPONSES = [
    "I understand you're sharing your feelings with me. It's important to acknowledge and process our emotions. Would you like to talk more about what's affecting your mood today?",
    "Thank you for opening up about how you're feeling. Emotions are a natural part of the human experience. What do you think might be contributing to these feelings?",
    "I appreciate you sharing your emotional state. Sometimes talking through our feelings can help us understand them better. Is there anything specific that's been on your mind?",
    "It sounds like you're experiencing some strong emotions. Remember that it's okay to feel whatever you're feeling. Would you like to explore what might be behind these feelings?",
    "Your feelings are valid and important. Sometimes our moods can tell us a lot about what we need. Have you noticed any patterns in what affects your emotional state?",
]

STORY_RESPONSES = [
    "Great storytelling starts with a compelling hook! Consider opening with conflict, mystery, or an intriguing character moment. What genre or theme are you exploring?",
    "Every good narrative needs engaging characters, a clear conflict and emotional stakes. What's the central tension in your story?",
    "For narrative structure, try the three-act format: Setup (25%), Confrontation (50%), and Resolution (25%). What's your story's main turning point?",
    "Character development drives great narration. Give your characters clear motivations, flaws and growth arcs. Who is your protagonist and what do they want?",
]

VOICE_RESPONSES = [
    "For effective voice-over scripts, write conversationally and include natural pauses. Read your script aloud to test its flow. What type of content are you creating?",
    "Voice narration works best with clear, concise language. Avoid complex sentences and use active voice. Are you writing for educational, marketing, or entertainment content?",
    "Consider your audience when crafting narration. Formal tone for business, casual for social media, warm for educational content. What's your target audience?",
    "Good narration pacing includes strategic pauses, emphasis on key points and varied sentence lengths. What's the main message you want to convey?",
]

CONTENT_RESPONSES = [
    "Content creation starts with understanding your audience's needs and interests. What problem are you solving or what value are you providing?",
    "Effective content follows the AIDA framework: Attention, Interest, Desire, Action. How can you grab attention in your opening?",
    "For engaging content, use storytelling techniques: relatable characters, conflict and resolution. What story can you tell to illustrate your point?",
    "Content that resonates combines useful information with emotional connection. What emotions do you want your audience to feel?",
]

HELP_RESPONSE = (
    "I'm Narumate, your AI assistant for creating engaging narrated content and supporting your emotional well-being! "
    "I can help you with:\n\n"
    "• Storytelling techniques and narrative structure\n"
    "• Script writing for voice-overs\n"
    "• Content creation strategies\n"
    "• Processing feelings and emotions\n"
    "• Mood tracking and self-reflection\n"
    "• Character development\n"
    "• Dialogue writing\n\n"
    "What specific aspect would you like to explore?"
)

GENERAL_RESPONSES = [
    "That's an interesting point! I'm here to help with both your creative projects and emotional well-being. How would you like to develop this idea further?",
    "I'd love to help you explore that concept. Whether it's for content creation or personal reflection, what specific aspect would you like to focus on?",
    "Great question! I can assist with narration, storytelling, and also provide a supportive space to discuss your feelings. What's your main goal today?",
    "That sounds like it could make for compelling content or meaningful self-reflection! How are you planning to approach this?",
]


def generate_fallback_response(
    user_input: str,
    mood: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> str:
    """Pick a canned reply for the user's input; a known mood forces the feelings bucket."""
    rng = rng or random.Random()

    if mood or contains_any(user_input, MOOD_KEYWORDS):
        return rng.choice(MOOD_RESPONSES)
    if contains_any(user_input, STORY_KEYWORDS):
        return rng.choice(STORY_RESPONSES)
    if contains_any(user_input, VOICE_KEYWORDS):
        return rng.choice(VOICE_RESPONSES)
    if contains_any(user_input, CONTENT_KEYWORDS):
        return rng.choice(CONTENT_RESPONSES)
    if contains_any(user_input, HELP_KEYWORDS):
        return HELP_RESPONSE

    return rng.choice(GENERAL_RESPONSES)
