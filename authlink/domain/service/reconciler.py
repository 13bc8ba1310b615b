"""Account link reconciler.

Resolves sign-in attempts that collide with an account registered under a
different method for the same email:

    NoPending --conflict--> Pending --any successful sign-in--> NoPending
    Pending --conflict--> Pending (replaced)
    Pending --logout--> NoPending (discarded)

The rejected credential is kept until the user signs in with the method the
provider recommends, then linked to that account.
"""

import logfire

from authlink.domain.error import (
    AccountExistsWithDifferentCredentialError,
    ProviderError,
)
from authlink.domain.model import PendingLinkRequest
from authlink.domain.value import (
    Credential,
    LinkAttempt,
    Principal,
    SignInFailure,
    SignInOutcome,
    SignInSuccess,
)

from .base import Service
from .error_messages import SIGN_IN_APOLOGY, conflict_message, message_for_error
from .identity_provider import IdentityProvider


class AccountLinkReconciler(Service):
    """Signs in through the identity provider and links conflicting credentials.

    One instance belongs to one session. Calls must not overlap; the session
    service serializes them.
    """

    def __init__(self, identity_provider: IdentityProvider) -> None:
        """Initialize reconciler.

        Args:
            identity_provider: Provider that verifies and links credentials
        """
        self.identity_provider = identity_provider
        self._pending: PendingLinkRequest | None = None

    @property
    def pending(self) -> PendingLinkRequest | None:
        """Credential waiting to be linked, if any."""
        return self._pending

    async def attempt_sign_in(
        self, credential: Credential, apology: str = SIGN_IN_APOLOGY
    ) -> SignInOutcome:
        """Sign in with a credential, linking any pending credential on success.

        Args:
            credential: Credential for one sign-in method
            apology: Message returned when the failure is not a provider error

        Returns:
            SignInSuccess with the principal, or SignInFailure
        """
        with logfire.span(
            "account_link_reconciler.attempt_sign_in",
            method=credential.method.value,
            has_pending=self._pending is not None,
        ):
            try:
                principal = await self.identity_provider.sign_in(credential)
            except AccountExistsWithDifferentCredentialError as e:
                return await self.resolve_conflict(e)
            except ProviderError as e:
                logfire.warn(
                    "Sign-in rejected by provider",
                    method=credential.method.value,
                    code=e.code,
                )
                return SignInFailure(message=message_for_error(e), code=e.code)
            except Exception as e:
                logfire.error(
                    "Unexpected sign-in error",
                    method=credential.method.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return SignInFailure(message=apology)

            if self._pending is not None:
                attempt = await self._link_pending(principal, self._pending)
                if attempt.principal is not None:
                    principal = attempt.principal

            logfire.info(
                "Signed in", method=credential.method.value, uid=principal.uid
            )
            return SignInSuccess(principal=principal)

    async def resolve_conflict(
        self, error: AccountExistsWithDifferentCredentialError
    ) -> SignInFailure:
        """Keep the rejected credential and tell the user how to sign in.

        The pending request is stored before the method lookup and survives a
        failed lookup, so a later successful sign-in still links it.

        Args:
            error: Conflict carrying the email and the rejected credential

        Returns:
            Informational failure naming the recommended sign-in method
        """
        with logfire.span(
            "account_link_reconciler.resolve_conflict",
            rejected_method=error.credential.method.value,
            replaces_pending=self._pending is not None,
        ):
            self._pending = PendingLinkRequest(
                conflicting_email=error.email,
                rejected_credential=error.credential,
            )

            try:
                methods = await self.identity_provider.list_sign_in_methods(
                    error.email
                )
            except Exception as e:
                logfire.warn(
                    "Sign-in method lookup failed, keeping pending link",
                    error=str(e),
                )
                return SignInFailure(message=str(e), code=error.code)

            if not methods:
                logfire.warn("Conflict reported for email without sign-in methods")
                return SignInFailure(message=message_for_error(error), code=error.code)

            # Only the recommended (first) method decides the message
            recommended = methods[0]
            logfire.info(
                "Sign-in conflict, pending link stored",
                recommended_method=recommended,
                rejected_method=error.credential.method.value,
            )
            return SignInFailure(
                message=conflict_message(recommended, error.credential.method),
                code=error.code,
            )

    def discard_pending(self) -> None:
        """Drop the pending credential without linking it."""
        if self._pending is not None:
            logfire.info(
                "Pending link discarded",
                method=self._pending.rejected_credential.method.value,
            )
        self._pending = None

    async def _link_pending(
        self, principal: Principal, pending: PendingLinkRequest
    ) -> LinkAttempt:
        """Link the pending credential to a freshly signed-in principal.

        The pending request is cleared whatever the outcome.
        """
        method = pending.rejected_credential.method

        try:
            linked = await self.identity_provider.link_credential(
                principal, pending.rejected_credential
            )
            attempt = LinkAttempt(
                conflicting_email=pending.conflicting_email,
                method=method,
                linked=True,
                principal=linked,
            )
        except Exception as e:
            attempt = LinkAttempt(
                conflicting_email=pending.conflicting_email,
                method=method,
                linked=False,
                error=str(e),
            )
        finally:
            self._pending = None

        if attempt.linked:
            logfire.info("Pending credential linked", method=method.value)
        else:
            logfire.warn(
                "Pending credential could not be linked",
                method=method.value,
                error=attempt.error,
            )
        return attempt
