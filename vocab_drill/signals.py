"""
Session event signals.

Publisher:
    answer_evaluated.send(session, correct=True, entry=entry, expected="cat")

Subscriber:
    @answer_evaluated.connect
    def on_answer(sender, **kwargs):
        ...
"""
from blinker import Namespace

drill_signals = Namespace()

# Payload: correct (bool), entry (VocabEntry), expected (str)
answer_evaluated = drill_signals.signal("answer_evaluated")

# Payload: total (int) - every entry of the working list answered correctly
session_perfect = drill_signals.signal("session_perfect")

# Payload: reason ('import', 'scope', 'shuffle', 'restart'), size (int)
list_changed = drill_signals.signal("list_changed")

# Payload: streak (int), sent on every multiple of the configured milestone
streak_milestone = drill_signals.signal("streak_milestone")

# Payload: best (int)
best_streak_changed = drill_signals.signal("best_streak_changed")

# Payload: preferences (Preferences)
preferences_changed = drill_signals.signal("preferences_changed")
