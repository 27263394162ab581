"""Pool state machine.

A SwapPool holds only its lifecycle status and its configuration. Every
operation takes the current reserves and pool token supply from the caller,
validates that the request is legal, and returns an outcome describing the
token movements the caller must execute. Nothing is applied here.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from token_swap.core.checked_math import checked_add, checked_sub, require_u64, to_u64
from token_swap.core.errors import (
    AlreadyInUse,
    EmptySupply,
    InvalidState,
    InvalidTokenIdentity,
    SlippageExceeded,
    UnsupportedCurveOperation,
    ZeroTradingTokens,
)
from token_swap.core.trade import (
    FeeResult,
    PoolReserves,
    RoundDirection,
    SwapResult,
    TradeDirection,
)
from token_swap.pool.config import PoolConfig, SwapConstraints, resolve_swap_constraints
from token_swap.pool.engine import execute_swap

logger = logging.getLogger(__name__)


class PoolStatus(Enum):
    """Lifecycle of a pool. There is no closed state; destruction is external."""
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


# ============================================================================
# Requests
# ============================================================================


@dataclass(frozen=True)
class SwapRequest:
    """Sell ``amount_in`` of ``source_mint`` for at least ``minimum_amount_out``."""
    source_mint: str
    destination_mint: str
    amount_in: int
    minimum_amount_out: int = 0
    with_host: bool = False


@dataclass(frozen=True)
class DepositAllRequest:
    """Mint ``pool_token_amount`` by depositing both tokens proportionally."""
    pool_token_amount: int
    maximum_token_a_amount: int
    maximum_token_b_amount: int


@dataclass(frozen=True)
class DepositSingleRequest:
    """Deposit exactly ``source_token_amount`` of one token."""
    source_mint: str
    source_token_amount: int
    minimum_pool_token_amount: int = 0


@dataclass(frozen=True)
class WithdrawAllRequest:
    """Redeem ``pool_token_amount`` for both tokens proportionally.

    ``fee_exempt`` is set by the caller when the pool tokens come from the
    owner fee account itself.
    """
    pool_token_amount: int
    minimum_token_a_amount: int = 0
    minimum_token_b_amount: int = 0
    fee_exempt: bool = False


@dataclass(frozen=True)
class WithdrawSingleRequest:
    """Withdraw exactly ``destination_token_amount`` of one token."""
    destination_mint: str
    destination_token_amount: int
    maximum_pool_token_amount: int
    fee_exempt: bool = False


# ============================================================================
# Outcomes
# ============================================================================


@dataclass(frozen=True)
class InitializeOutcome:
    pool_token_amount: int  # Minted to the initial liquidity provider
    reserves: PoolReserves


@dataclass(frozen=True)
class SwapOutcome:
    trade_direction: TradeDirection
    result: SwapResult
    new_reserves: PoolReserves
    owner_fee_pool_tokens: int  # Minted to the owner fee account
    host_fee_pool_tokens: int   # Minted to the host fee account
    new_pool_token_supply: int


@dataclass(frozen=True)
class DepositOutcome:
    pool_token_amount: int  # Minted to the depositor
    token_a_amount: int     # Taken from the depositor
    token_b_amount: int
    trade_fee: int          # Implicit swap fee of a single-sided deposit
    new_reserves: PoolReserves
    new_pool_token_supply: int


@dataclass(frozen=True)
class WithdrawOutcome:
    pool_tokens_burned: int
    owner_fee_pool_tokens: int  # Transferred to the owner fee account
    token_a_amount: int         # Paid out to the withdrawer
    token_b_amount: int
    trade_fee: int              # Implicit swap fee of a single-sided withdrawal
    new_reserves: PoolReserves
    new_pool_token_supply: int

    @property
    def pool_token_amount(self) -> int:
        """Total pool tokens taken from the withdrawer."""
        return self.pool_tokens_burned + self.owner_fee_pool_tokens


# ============================================================================
# State machine
# ============================================================================


@dataclass
class SwapPool:
    """Lifecycle and operation validation for one pool.

    Usage:
        pool = SwapPool()
        pool.initialize(config, 1000, 1000)
        outcome = pool.swap(request, reserves, pool_token_supply)
    """
    config: Optional[PoolConfig] = None
    status: PoolStatus = PoolStatus.UNINITIALIZED
    constraints: Optional[SwapConstraints] = field(default_factory=resolve_swap_constraints)

    @property
    def is_initialized(self) -> bool:
        return self.status is PoolStatus.INITIALIZED

    def _require_initialized(self) -> PoolConfig:
        if not self.is_initialized or self.config is None:
            raise InvalidState("pool is not initialized")
        return self.config

    def _require_deposits(self, config: PoolConfig) -> None:
        if not config.curve.calculator.allows_deposits():
            raise UnsupportedCurveOperation(
                f"{config.curve_type.name} pools do not accept deposits"
            )

    def initialize(
        self, config: PoolConfig, initial_reserve_a: int, initial_reserve_b: int
    ) -> InitializeOutcome:
        """Validate a configuration and its seed reserves, then mark the pool initialized.

        Raises:
            AlreadyInUse: If the pool was already initialized
            InvalidFee: If a fee fraction is malformed or violates constraints
            InvalidCurve: If curve parameters or seed reserves are unusable
        """
        if self.is_initialized:
            raise AlreadyInUse("pool is already initialized")

        reserves = PoolReserves(initial_reserve_a, initial_reserve_b)
        config.validate()
        if self.constraints is not None:
            self.constraints.validate_curve(config.curve)
            self.constraints.validate_fees(config.fees)

        calculator = config.curve.calculator
        calculator.validate_supply(reserves.token_a, reserves.token_b)
        pool_token_amount = to_u64(calculator.new_pool_supply(reserves.token_a, reserves.token_b))
        if pool_token_amount == 0:
            raise ZeroTradingTokens("initial reserves are worth zero pool tokens")

        self.config = config
        self.status = PoolStatus.INITIALIZED
        logger.debug(
            "Initialized %s pool %s with reserves (%d, %d), minted %d pool tokens",
            config.curve_type.name, config.pool_mint,
            reserves.token_a, reserves.token_b, pool_token_amount,
        )
        return InitializeOutcome(pool_token_amount=pool_token_amount, reserves=reserves)

    def _direction_for_pair(
        self, config: PoolConfig, source_mint: str, destination_mint: str
    ) -> TradeDirection:
        pair = (source_mint, destination_mint)
        if pair == (config.token_a_mint, config.token_b_mint):
            return TradeDirection.A_TO_B
        if pair == (config.token_b_mint, config.token_a_mint):
            return TradeDirection.B_TO_A
        raise InvalidTokenIdentity(
            f"({source_mint!r}, {destination_mint!r}) is not the pool's token pair"
        )

    def _direction_for_mint(self, config: PoolConfig, mint: str) -> TradeDirection:
        """Map a single token identifier to the side it trades on (A_TO_B for token A)."""
        if mint == config.token_a_mint:
            return TradeDirection.A_TO_B
        if mint == config.token_b_mint:
            return TradeDirection.B_TO_A
        raise InvalidTokenIdentity(f"{mint!r} is not one of the pool's tokens")

    def swap(
        self, request: SwapRequest, reserves: PoolReserves, pool_token_supply: int
    ) -> SwapOutcome:
        """Decide a swap and the pool tokens owed for the owner and host fees."""
        config = self._require_initialized()
        require_u64(pool_token_supply)
        direction = self._direction_for_pair(config, request.source_mint, request.destination_mint)
        source_reserve, destination_reserve = reserves.source_destination(direction)

        result = execute_swap(
            input_amount=request.amount_in,
            source_reserve=source_reserve,
            destination_reserve=destination_reserve,
            fees=config.fees,
            curve=config.curve,
            minimum_output=request.minimum_amount_out,
            trade_direction=direction,
            with_host=request.with_host,
        )
        new_reserves = PoolReserves.from_source_destination(
            direction, result.new_source_reserve, result.new_destination_reserve
        )

        owner_fee_pool_tokens = self._fee_pool_tokens(
            config, result.owner_fee, new_reserves, pool_token_supply, direction
        )
        host_fee_pool_tokens = self._fee_pool_tokens(
            config, result.host_fee, new_reserves, pool_token_supply, direction
        )
        new_supply = to_u64(
            checked_add(checked_add(pool_token_supply, owner_fee_pool_tokens), host_fee_pool_tokens)
        )

        logger.debug(
            "Swap %s: in=%d out=%d trade_fee=%d owner_fee=%d host_fee=%d",
            direction.value, result.source_amount_swapped, result.destination_amount_swapped,
            result.trade_fee, result.owner_fee, result.host_fee,
        )
        return SwapOutcome(
            trade_direction=direction,
            result=result,
            new_reserves=new_reserves,
            owner_fee_pool_tokens=owner_fee_pool_tokens,
            host_fee_pool_tokens=host_fee_pool_tokens,
            new_pool_token_supply=new_supply,
        )

    def _fee_pool_tokens(
        self,
        config: PoolConfig,
        fee_amount: int,
        reserves: PoolReserves,
        pool_token_supply: int,
        direction: TradeDirection,
    ) -> int:
        """Value a source-token fee already inside the pool in pool tokens, rounded down."""
        calculator = config.curve.calculator
        if fee_amount == 0 or pool_token_supply == 0 or not calculator.allows_deposits():
            return 0
        return calculator.withdraw_single_token_type_exact_out(
            fee_amount,
            reserves.token_a,
            reserves.token_b,
            pool_token_supply,
            direction,
            RoundDirection.FLOOR,
        )

    def deposit_all(
        self, request: DepositAllRequest, reserves: PoolReserves, pool_token_supply: int
    ) -> DepositOutcome:
        """Decide a proportional deposit.

        An empty pool (supply 0) takes the declared maximum amounts and mints
        their normalized value, without fees. Otherwise the token amounts for
        the requested pool tokens are rounded up.
        """
        config = self._require_initialized()
        self._require_deposits(config)
        require_u64(
            request.pool_token_amount,
            request.maximum_token_a_amount,
            request.maximum_token_b_amount,
            pool_token_supply,
        )
        if request.pool_token_amount == 0:
            raise ZeroTradingTokens("deposit must request a non-zero pool token amount")

        calculator = config.curve.calculator
        if pool_token_supply == 0:
            token_a_amount = request.maximum_token_a_amount
            token_b_amount = request.maximum_token_b_amount
            calculator.validate_supply(token_a_amount, token_b_amount)
            pool_token_amount = to_u64(calculator.new_pool_supply(token_a_amount, token_b_amount))
            if pool_token_amount < request.pool_token_amount:
                raise SlippageExceeded(
                    f"first deposit is worth {pool_token_amount} pool tokens, "
                    f"{request.pool_token_amount} requested"
                )
        else:
            pool_token_amount = request.pool_token_amount
            amounts = calculator.pool_tokens_to_trading_tokens(
                pool_token_amount,
                pool_token_supply,
                reserves.token_a,
                reserves.token_b,
                RoundDirection.CEILING,
            )
            token_a_amount = amounts.token_a_amount
            token_b_amount = amounts.token_b_amount
            if token_a_amount == 0 or token_b_amount == 0:
                raise ZeroTradingTokens(
                    f"{pool_token_amount} pool tokens are worth zero of a token"
                )
            if token_a_amount > request.maximum_token_a_amount:
                raise SlippageExceeded(
                    f"token A required {token_a_amount} exceeds maximum "
                    f"{request.maximum_token_a_amount}"
                )
            if token_b_amount > request.maximum_token_b_amount:
                raise SlippageExceeded(
                    f"token B required {token_b_amount} exceeds maximum "
                    f"{request.maximum_token_b_amount}"
                )

        new_reserves = PoolReserves(
            to_u64(checked_add(reserves.token_a, token_a_amount)),
            to_u64(checked_add(reserves.token_b, token_b_amount)),
        )
        new_supply = to_u64(checked_add(pool_token_supply, pool_token_amount))
        logger.debug(
            "Deposit: a=%d b=%d minted=%d", token_a_amount, token_b_amount, pool_token_amount
        )
        return DepositOutcome(
            pool_token_amount=pool_token_amount,
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
            trade_fee=0,
            new_reserves=new_reserves,
            new_pool_token_supply=new_supply,
        )

    def deposit_single(
        self, request: DepositSingleRequest, reserves: PoolReserves, pool_token_supply: int
    ) -> DepositOutcome:
        """Decide a deposit of one token, charged the fee of its implicit half swap."""
        config = self._require_initialized()
        self._require_deposits(config)
        require_u64(
            request.source_token_amount, request.minimum_pool_token_amount, pool_token_supply
        )
        if request.source_token_amount == 0:
            raise ZeroTradingTokens("deposit amount must be non-zero")
        if pool_token_supply == 0:
            raise EmptySupply("single-token deposits need existing liquidity")

        direction = self._direction_for_mint(config, request.source_mint)
        calculator = config.curve.calculator
        fee = calculator.deposit_trade_fee_adjustment(request.source_token_amount, config.fees)
        pool_token_amount = calculator.deposit_single_token_type(
            fee.net_amount,
            reserves.token_a,
            reserves.token_b,
            pool_token_supply,
            direction,
            RoundDirection.FLOOR,
        )
        if pool_token_amount == 0:
            raise ZeroTradingTokens(f"deposit of {request.source_token_amount} mints nothing")
        if pool_token_amount < request.minimum_pool_token_amount:
            raise SlippageExceeded(
                f"deposit mints {pool_token_amount}, minimum {request.minimum_pool_token_amount}"
            )

        source_reserve, other_reserve = reserves.source_destination(direction)
        new_reserves = PoolReserves.from_source_destination(
            direction,
            to_u64(checked_add(source_reserve, fee.gross_amount)),
            other_reserve,
        )
        token_a_amount, token_b_amount = _one_sided(direction, fee.gross_amount)
        logger.debug(
            "Single deposit %s: amount=%d fee=%d minted=%d",
            direction.value, fee.gross_amount, fee.fee_amount, pool_token_amount,
        )
        return DepositOutcome(
            pool_token_amount=to_u64(pool_token_amount),
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
            trade_fee=fee.fee_amount,
            new_reserves=new_reserves,
            new_pool_token_supply=to_u64(checked_add(pool_token_supply, pool_token_amount)),
        )

    def withdraw_all(
        self, request: WithdrawAllRequest, reserves: PoolReserves, pool_token_supply: int
    ) -> WithdrawOutcome:
        """Decide a proportional withdrawal, rounding token amounts down."""
        config = self._require_initialized()
        require_u64(
            request.pool_token_amount,
            request.minimum_token_a_amount,
            request.minimum_token_b_amount,
            pool_token_supply,
        )
        if request.pool_token_amount == 0:
            raise ZeroTradingTokens("withdrawal must redeem a non-zero pool token amount")

        if request.fee_exempt:
            fee = FeeResult(
                gross_amount=request.pool_token_amount,
                fee_amount=0,
                net_amount=request.pool_token_amount,
            )
        else:
            fee = config.fees.owner_withdraw_fee_result(request.pool_token_amount)
        new_supply = checked_sub(pool_token_supply, fee.net_amount)

        amounts = config.curve.calculator.pool_tokens_to_trading_tokens(
            fee.net_amount,
            pool_token_supply,
            reserves.token_a,
            reserves.token_b,
            RoundDirection.FLOOR,
        )
        token_a_amount = min(amounts.token_a_amount, reserves.token_a)
        token_b_amount = min(amounts.token_b_amount, reserves.token_b)
        if token_a_amount == 0 and token_b_amount == 0:
            raise ZeroTradingTokens(f"{fee.net_amount} pool tokens are worth nothing")
        if (token_a_amount == 0 and reserves.token_a != 0) or (
            token_b_amount == 0 and reserves.token_b != 0
        ):
            raise ZeroTradingTokens(f"{fee.net_amount} pool tokens are worth zero of a token")
        if token_a_amount < request.minimum_token_a_amount:
            raise SlippageExceeded(
                f"token A out {token_a_amount} is below minimum {request.minimum_token_a_amount}"
            )
        if token_b_amount < request.minimum_token_b_amount:
            raise SlippageExceeded(
                f"token B out {token_b_amount} is below minimum {request.minimum_token_b_amount}"
            )

        new_reserves = PoolReserves(
            reserves.token_a - token_a_amount, reserves.token_b - token_b_amount
        )
        logger.debug(
            "Withdraw: burned=%d fee=%d a=%d b=%d",
            fee.net_amount, fee.fee_amount, token_a_amount, token_b_amount,
        )
        return WithdrawOutcome(
            pool_tokens_burned=fee.net_amount,
            owner_fee_pool_tokens=fee.fee_amount,
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
            trade_fee=0,
            new_reserves=new_reserves,
            new_pool_token_supply=new_supply,
        )

    def withdraw_single(
        self, request: WithdrawSingleRequest, reserves: PoolReserves, pool_token_supply: int
    ) -> WithdrawOutcome:
        """Decide an exact-out withdrawal of one token, rounding pool tokens up."""
        config = self._require_initialized()
        require_u64(
            request.destination_token_amount, request.maximum_pool_token_amount, pool_token_supply
        )
        if request.destination_token_amount == 0:
            raise ZeroTradingTokens("withdrawal amount must be non-zero")

        direction = self._direction_for_mint(config, request.destination_mint)
        calculator = config.curve.calculator
        fee = calculator.withdraw_trade_fee_adjustment(
            request.destination_token_amount, config.fees
        )
        burn_amount = calculator.withdraw_single_token_type_exact_out(
            fee.gross_amount,
            reserves.token_a,
            reserves.token_b,
            pool_token_supply,
            direction,
            RoundDirection.CEILING,
        )
        if burn_amount == 0:
            raise ZeroTradingTokens(
                f"withdrawal of {request.destination_token_amount} burns no pool tokens"
            )
        withdraw_fee = 0 if request.fee_exempt else config.fees.owner_withdraw_fee(burn_amount)
        total = checked_add(burn_amount, withdraw_fee)
        if total > request.maximum_pool_token_amount:
            raise SlippageExceeded(
                f"withdrawal needs {total} pool tokens, maximum {request.maximum_pool_token_amount}"
            )
        new_supply = checked_sub(pool_token_supply, burn_amount)

        destination_reserve, other_reserve = reserves.source_destination(direction)
        new_reserves = PoolReserves.from_source_destination(
            direction,
            checked_sub(destination_reserve, request.destination_token_amount),
            other_reserve,
        )
        token_a_amount, token_b_amount = _one_sided(direction, request.destination_token_amount)
        logger.debug(
            "Single withdraw %s: amount=%d fee=%d burned=%d owner_fee=%d",
            direction.value, request.destination_token_amount, fee.fee_amount,
            burn_amount, withdraw_fee,
        )
        return WithdrawOutcome(
            pool_tokens_burned=burn_amount,
            owner_fee_pool_tokens=withdraw_fee,
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
            trade_fee=fee.fee_amount,
            new_reserves=new_reserves,
            new_pool_token_supply=new_supply,
        )


def _one_sided(direction: TradeDirection, amount: int) -> tuple[int, int]:
    if direction is TradeDirection.A_TO_B:
        return amount, 0
    return 0, amount
