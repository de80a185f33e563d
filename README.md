# groupbot

Building blocks for a group chat bot. Each module covers one feature and
does not depend on any chat framework. You pass in text, numbers,
timestamps and random generators such as `random.Random`. You get back
plain Python values, or text that is ready to send. Failures raise
exceptions.

## Install

```
pip install groupbot
pip install "groupbot[test]"   # with pytest and responses
```

## Modules

- `groupbot.runcode` runs code snippets on an online compiler.
  - `parse_command` reads `>runcode[raw] <language> <code>`.
  - `lookup_language` and `template_for` raise `UnsupportedLanguageError`
    for an unknown language.
  - `run_code` raises `RunCodeError` when the remote side fails.
  - `clear_newline_suffix` and `cut_too_long` tidy the output. It is cut
    after 30 line breaks or 1000 characters.
  - The API token is read from the `GROUPBOT_RUNCODE_TOKEN` environment
    variable when the module is imported.
- `groupbot.wtf` holds a numbered catalogue of fun "predict" tests.
  - `TABLE` lists them, `get_wtf` picks one by index, and `list_text`
    returns the numbered list.
  - `Wtf.build_url`, `Wtf.parse_result` and `Wtf.predict` run a test.
    They raise `WtfError` on failure.
- `groupbot.nbnhhsh` expands pinyin abbreviations with `parse_command`,
  `guess`, `parse_guess` and `format_reply`.
- `groupbot.thesaurus` gives canned replies from a JSON dictionary.
  - Build one with `Thesaurus.from_json`.
  - `Thesaurus.keys` lists the trigger phrases.
  - `Thesaurus.reply` picks a reply for an exact match.
- `groupbot.shadiao` fetches joke texts.
  - `fetch(command)` accepts 哄我, 来碗毒鸡汤, 发个朋友圈, 来碗绿茶, 渣我,
    讲个段子 and 马丁路德骂我.
  - `extract_shadiao_text`, `extract_lovelive_text`, `extract_duanzi` and
    `extract_luther` parse the replies.
- `groupbot.nsfw` turns image classification scores (`Picture`) into a
  verdict.
  - `judge` returns a verdict for an explicit request.
  - `auto_judge` returns a verdict only when something is flagged.
- `groupbot.reborn` is a weighted random reincarnation joke.
  - `WeightedChooser` does the weighted pick.
  - `load_rates` reads the country rates and `country_chooser` builds a
    chooser from them.
  - `reborn` returns the message.
- `groupbot.tarot` draws Major Arcana cards and lays out spreads.
  - `parse_count` reads `抽[n张]塔罗牌`.
  - `Tarot.from_json` loads the cards and the spreads.
  - `Tarot.draw`, `Tarot.interpret` and `Tarot.lay_formation` use them.
  - Errors raise `TarotError`.
- `groupbot.marriage` keeps one couple per person per day in each group,
  using SQLite.
  - `MarriageRegistry` handles registering, looking up (`Status`,
    `Couple`), remarrying, divorcing, the roster and daily resets.
  - `check_single`, `check_mistress` and `check_married` return the reason
    an action is refused, or `None` when it is allowed.
  - `slice_name` shortens a name to a measured width.
- `groupbot.score` handles the daily sign-in and score levels, using SQLite.
  - `ScoreDB.sign_in` returns a `SignInResult`.
  - Helpers: `get_level`, `next_level_score`, `get_hour_word`.
- `groupbot.wordle` is a word guessing game.
  - `WordleGame.guess` raises `LengthNotEnoughError`, `UnknownWordError`
    or `TimesRunOutError`.
  - `WordleGame.states` gives the per-letter `LetterState`.
  - `WordleGame.render` draws the board as PNG bytes.
  - `class_for` and `load_word_list` prepare games.
- `groupbot.vtb` is a three-level database of VTuber voice clips, using
  SQLite.
  - `VtbDB` lists and picks clips.
  - It can store the list and page replies, or download them with
    `fetch_vtb_list` and `store_vtb`.
- `groupbot.word_count` finds hot words.
  - `load_stopwords`, `is_chinese_word`, `count_words` and
    `rank_by_word_count` do the counting.
  - `parse_command` reads `热词 [group] [count]`.
- `groupbot.sleep` ranks good-mornings and good-nights, using SQLite.
  - `SleepDB.sleep` and `SleepDB.get_up` record them.
  - `morning_reply` and `evening_reply` build the replies.
  - Helpers: `is_morning`, `is_evening`, `time_duration`.

The database classes default to an in-memory SQLite database. Pass a file
path to keep the data. They can be used as context managers.

## Example

```python
from groupbot.wordle import WordleGame, UnknownWordError

game = WordleGame("apple", dictionary=["apple", "angle"])
try:
    game.guess("zzzzz")
except UnknownWordError:
    print("not a word")
game.guess("angle")          # False: recorded, not a win
print(game.states()[0])      # per-letter feedback
png = game.render()          # board image as PNG bytes
```

## What the package does not do

- It does not connect to a chat service, and it has no command dispatcher
  or bot program. Your bot reads messages, calls these functions and sends
  the results.
- It does not download the data files some features need: the tarot
  cards, reincarnation rates, thesaurus entries, word lists and stopwords.
  You pass their contents in.
- It has no word segmenter or chat-history fetcher. `count_words` takes a
  `segment` function from you.
- It draws no images except the wordle board. That includes sign-in cards,
  rankings and rosters.
- It has no galgame picture feature.