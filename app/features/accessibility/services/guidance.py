"""Static reference material served alongside analysis results."""

DISABILITY_RESOURCES = {
    "visual": {
        "name": "Visual Impairments",
        "description": "Includes blindness, low vision, and color blindness",
        "assistiveTechnologies": [
            "Screen readers (JAWS, NVDA, VoiceOver)",
            "Screen magnifiers",
            "High contrast displays",
            "Braille displays",
        ],
        "guidelines": [
            "Provide descriptive alt text for all images",
            "Use sufficient color contrast (4.5:1 minimum)",
            "Enable zoom up to 200% without horizontal scrolling",
            "Use proper heading hierarchy",
            "Provide text alternatives for visual content",
        ],
        "testingMethods": [
            "Test with screen reader software",
            "Navigate without using a mouse",
            "Verify content in high contrast mode",
            "Check color contrast ratios",
            "Test zoom functionality",
        ],
    },
    "auditory": {
        "name": "Auditory Impairments",
        "description": "Includes deafness and hearing loss",
        "assistiveTechnologies": [
            "Closed captions",
            "Sign language interpreters",
            "Visual indicators",
            "Hearing aids with induction loops",
        ],
        "guidelines": [
            "Provide captions for all video content",
            "Include transcripts for audio content",
            "Use visual alerts instead of audio-only alerts",
            "Ensure captions are accurate and synchronized",
        ],
        "testingMethods": [
            "Test all functionality without sound",
            "Verify caption accuracy and timing",
            "Check for visual indicators of audio events",
            "Test with sound muted",
        ],
    },
    "motor": {
        "name": "Motor Impairments",
        "description": "Includes limited fine motor control and paralysis",
        "assistiveTechnologies": [
            "Switch devices",
            "Eye-tracking systems",
            "Voice control software",
            "Keyboard-only navigation",
            "Head pointers",
        ],
        "guidelines": [
            "Ensure all functionality is keyboard accessible",
            "Make click targets at least 44x44 pixels",
            "Provide generous spacing between interactive elements",
            "Avoid time limits or allow extensions",
            "Support alternative input methods",
        ],
        "testingMethods": [
            "Navigate using only the keyboard",
            "Test with switch device simulation",
            "Verify click target sizes",
            "Check for keyboard traps",
            "Test timeout behaviors",
        ],
    },
    "cognitive": {
        "name": "Cognitive Impairments",
        "description": "Includes learning disabilities, memory issues, and attention disorders",
        "assistiveTechnologies": [
            "Text-to-speech software",
            "Reading guides and overlays",
            "Content simplification tools",
            "Memory aids and bookmarks",
        ],
        "guidelines": [
            "Use clear, simple language",
            "Provide help text and instructions",
            "Use consistent navigation patterns",
            "Minimize distractions and interruptions",
            "Allow users to control timing",
        ],
        "testingMethods": [
            "Test with text-to-speech enabled",
            "Verify clear error messages and instructions",
            "Check for consistent design patterns",
            "Test with reduced motion preferences",
            "Verify timeout warnings and extensions",
        ],
    },
}

WCAG_LEVELS = {
    "A": {
        "description": "Minimum level of accessibility",
        "keyRequirements": ["Text alternatives", "Captions for prerecorded video", "Keyboard accessible"],
    },
    "AA": {
        "description": "Standard level for most organizations",
        "keyRequirements": ["Color contrast", "Resize text", "Focus indicators", "Page titles"],
    },
    "AAA": {
        "description": "Enhanced level of accessibility",
        "keyRequirements": ["Sign language", "Context-sensitive help", "Large click targets"],
    },
}

WCAG_INFO = {
    "version": "2.1",
    "levels": list(WCAG_LEVELS),
    "principles": {
        "perceivable": {
            "name": "Perceivable",
            "description": "Information must be presentable in ways users can perceive",
            "guidelines": ["Text alternatives", "Time-based media", "Adaptable", "Distinguishable"],
        },
        "operable": {
            "name": "Operable",
            "description": "Interface components must be operable",
            "guidelines": ["Keyboard accessible", "No seizures", "Navigable", "Input methods"],
        },
        "understandable": {
            "name": "Understandable",
            "description": "Information and UI operation must be understandable",
            "guidelines": ["Readable", "Predictable", "Input assistance"],
        },
        "robust": {
            "name": "Robust",
            "description": "Content must be robust enough for interpretation by assistive technologies",
            "guidelines": ["Compatible"],
        },
    },
}
