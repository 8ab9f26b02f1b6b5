"""Statistics API endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import SimulationRequest, SimulationResponse
from config import config
from core.statistics import simulate_games

router = APIRouter()


@router.post("/simulate")
async def simulate(request: SimulationRequest) -> SimulationResponse:
    """Play complete games headlessly and report aggregate results."""
    if request.games > config.game.max_simulated_games:
        raise HTTPException(
            status_code=400,
            detail=f"At most {config.game.max_simulated_games} games per request",
        )

    summary = simulate_games(
        num_games=request.games,
        seed=request.seed,
        shuffle_method=request.shuffle_method,
        max_battles=min(request.max_battles, config.game.max_battles),
    )
    return SimulationResponse(
        games=summary.games,
        player1_wins=summary.player1_wins,
        player2_wins=summary.player2_wins,
        ties=summary.ties,
        capped=summary.capped,
        mean_battles=summary.mean_battles,
        mean_wars=summary.mean_wars,
        longest_war=summary.longest_war,
        player1_win_rate=summary.player1_win_rate,
        player2_win_rate=summary.player2_win_rate,
        tie_rate=summary.tie_rate,
    )
