"""Fixed phrases and timings for the interview call flow."""

# Spoken when the call first reaches the agent
WELCOME_MESSAGES = [
    "नमस्ते, सीजीनेट स्वरा में आपका स्वागत है।",
    "मैं आपकी कहानी या समस्या सुनने के लिए यहां हूँ।",
    "कृपया अपने गांव का नाम, जिला और अपनी समस्या विस्तार से बताएं।",
    "जैसे स्वास्थ्य सेवाओं की कमी, पानी की समस्या, या सड़कों की स्थिति।",
]

START_SPEAKING_PROMPT = "कृपया अब बोलना शुरू करें।"

# Re-prompt inside every gather after the first
SPEAK_NOW_PROMPT = "कृपया अब बोलें।"

# Used instead of the next question when the caller was silent and the
# repeat-on-silence policy is active
REPEAT_PROMPT = "मुझे आपकी बात सुनाई नहीं दी। कृपया अपना जवाब फिर से बताएं।"

FAREWELL_MESSAGES = [
    "सीजीनेट स्वरा के साथ बात करने के लिए धन्यवाद।",
    "आपकी आवाज महत्वपूर्ण है।",
    "नमस्कार।",
]

NO_INPUT_MESSAGE = "मुझे कोई जवाब नहीं मिला। धन्यवाद, आपका संदेश रिकॉर्ड कर लिया गया है। नमस्कार।"

APOLOGY_MESSAGE = "क्षमा करें, कुछ तकनीकी समस्या आ गई है। आपका संदेश रिकॉर्ड किया गया है। धन्यवाद।"

# Pauses (milliseconds)
WELCOME_PAUSE_MS = 1000
STABILIZING_PAUSE_MS = 500
FRAGMENT_PAUSE_MS = 300
CLOSING_PAUSE_MS = 500
