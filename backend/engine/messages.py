"""
Completion flavor text. Purely cosmetic: picked once the verdict is known.
"""

SUCCESS_MESSAGES = [
    "Rolling Complete - you successfully rolled that wormhole",
    "Wormhole Collapsed - like your enemies' hopes and dreams",
    "Mission Accomplished - that hole is deader than your corp's activity",
    "Perfect Roll - smoother than your FC's voice after fleet comms",
    "Wormhole Yeeted - into the void where it belongs",
    "Hole Terminated - with extreme prejudice and questionable piloting",
    "Flawless Victory - Bob smiles upon your rolling skills",
    "Wormhole Deleted - beautiful execution",
    "WORMHOLE COLLAPSE: SUCCESSFUL. All parameters within acceptable limits",
    "System notification: Spatial anomaly terminated with 99.97% efficiency",
    "Objective achieved. I'm sorry Dave, that wormhole had to go",
]

FAILURE_MESSAGES = [
    "Rolling Complete - whoops, someone is stuck on the far side of infinity",
    "Wormhole Collapsed - congrats, you just made some expensive floating debris",
    "Mission Failed - someone's getting podded back to highsec tonight",
    "Rolling Disaster - at least the killboard will be entertaining",
    "Oops Moment - hope those ships had good insurance",
    "Expensive Mistake - time to update your loss statistics",
    "Catastrophic Success - you rolled the hole AND your corpmates",
    "Rolling Malfunction - someone's explaining this to leadership",
    "ERROR: Human error detected. Assets stranded beyond recovery parameters",
    "Calculation error: You have created a logic paradox, Dave",
]


def draw_completion_message(verdict: str, rng) -> str:
    pool = SUCCESS_MESSAGES if verdict == "win" else FAILURE_MESSAGES
    return rng.choice(pool)
