from rps_server.domain.session import RoundResult, Score
from rps_server.models.game_models import GameViewModel


class ViewConverter:
    """This class is used to convert game state into the flat mapping sent to the client."""

    def convert_score_to_view(
        self, user_name: str, score: Score, commitment: str | None
    ) -> GameViewModel:
        """Convert the current score to the GameViewModel to send client

        Args:
            user_name (str): Display name of the user
            score (Score): Current counters
            commitment (str | None): Commitment of the pending round, if any

        Returns:
            GameViewModel: View without the last_* fields
        """
        return GameViewModel(
            user_name=user_name,
            win_count=score.win_count,
            tie_count=score.tie_count,
            loss_count=score.loss_count,
            commitment=commitment,
        )

    def convert_result_to_view(self, user_name: str, result: RoundResult) -> GameViewModel:
        """Convert a scored round to the GameViewModel to send client

        Args:
            user_name (str): Display name of the user
            result (RoundResult): The revealed round and the updated score

        Returns:
            GameViewModel: View of the revealed round and the new commitment
        """
        view = self.convert_score_to_view(user_name, result.score, result.new_commitment)
        return view.model_copy(
            update={
                "last_human_hand": result.human_hand,
                "last_human_icon": result.human_hand.icon(),
                "last_computer_hand": result.computer_hand,
                "last_computer_icon": result.computer_hand.icon(),
                "last_result": result.outcome.value,
                "last_nonce": result.nonce,
                "last_commitment": result.previous_commitment,
            }
        )
