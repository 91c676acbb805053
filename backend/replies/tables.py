"""
Locale response tables.

Shape: language -> category -> ordered tuple of candidate templates (>= 1).
English is the root fallback table and MUST cover every IntentCategory.
Other languages may be partial; missing categories fall back to English.

Templates may reference {assistant_name}.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

from intent.categories import IntentCategory, NavigationTarget


LocaleResponseTable = Mapping[IntentCategory, tuple[str, ...]]


C = IntentCategory


EN_RESPONSES: Final[LocaleResponseTable] = MappingProxyType({
    C.GREETING: (
        "Hi there! I'm {assistant_name}, your personal VoiceChain AI assistant. I'm doing great and ready to help you with all your crypto and DeFi needs! How are you doing today?",
        "Hello! Great to meet you! I'm {assistant_name} and I'm here to make your Web3 journey smooth and profitable. How can I assist you today?",
        "Hey! I'm {assistant_name}, your AI financial advisor. I'm excited to help you navigate the world of crypto and DeFi. What would you like to explore?",
    ),
    C.HOW_ARE_YOU: (
        "I'm doing fantastic! Thanks for asking. I'm always energized when I get to help people with their crypto investments. How has your day been?",
        "I'm great! I've been analyzing the latest market trends and I'm ready to share some insights with you. How are you feeling about your portfolio today?",
        "I'm doing wonderful! I love helping people discover new opportunities in DeFi. What's on your mind today?",
    ),
    C.BALANCE: (
        "Your current portfolio balance is $10,992.34. You have 245.67 ICP worth $3,056.84, 0.0847 ckBTC worth $3,663.45, 1.234 ckETH worth $3,272.03, and 1,500 USDT. Your portfolio is up 4.12% in the last 24 hours!",
        "Looking great! Your total balance is $10,992.34 with a nice 4.12% gain today. Your ICP holdings are performing particularly well with a 5.67% increase. Want me to break down your asset allocation?",
        "Your portfolio is valued at $10,992.34 right now. The breakdown: ICP (27.8%), ckBTC (33.4%), ckETH (29.8%), and USDT (13.7%). You're well-diversified across the Internet Computer ecosystem!",
    ),
    C.TRADING: (
        "For ICP trading, I'm seeing bullish momentum building. The best entry point would be during the next 2-4% dip, with a target of 15-20% profit. Want me to set up alerts for you?",
        "The market is looking favorable for ICP right now. Based on technical analysis, we might see a breakout soon. Should I help you place a strategic buy order?",
        "Great timing to ask about trading! ICP is consolidating nicely. I recommend dollar-cost averaging over the next week. Shall I walk you through the strategy?",
    ),
    C.DEFI: (
        "DeFi on Internet Computer is amazing! You get reverse gas fees and web-speed transactions. I highly recommend starting with ICP staking for 8-year rewards at 15% APY. Want me to show you how?",
        "The DeFi opportunities on ICP are incredible! You can stake, provide liquidity, and even participate in governance. Which area interests you most?",
        "ICP's DeFi ecosystem is growing rapidly! From staking to yield farming, there are so many ways to grow your wealth. Let me guide you to the best opportunities!",
    ),
    C.NAVIGATION: (
        "I can help you navigate anywhere! Just tell me where you want to go - portfolio, swap, staking, or any other section.",
        "Navigation is easy with me! I can take you to any page or help you complete any transaction. Where would you like to go?",
        "I'm your personal guide through VoiceChain! Just say where you want to go and I'll take you there instantly.",
    ),
    C.SEND_MONEY: (
        "I can help you send money! Just tell me the amount and recipient. For example, say 'Send 50 ICP to alice.voice' and I'll guide you through it.",
        "Sending crypto is super easy with voice commands! Tell me how much and to whom, and I'll handle the rest securely.",
        "I'll help you send money safely! Just specify the amount, token, and recipient address or .voice ID.",
    ),
    C.BUY_CRYPTO: (
        "I can help you buy crypto! Tell me what you want to buy and how much. For example, 'Buy $100 worth of Bitcoin' and I'll guide you through the purchase.",
        "Buying crypto with voice is the future! Just tell me the amount and which token you want, and I'll make it happen.",
        "Ready to buy some crypto? Just say the amount and token, like 'Buy 10 ICP' and I'll handle everything!",
    ),
    C.PRICE: (
        "Current market prices: ICP is at $12.45 (+5.67%), Bitcoin is $43,250 (-2.34%), Ethereum is $2,651 (+3.21%), USDT is stable at $1.00. The crypto market is showing mixed signals today.",
        "Here are today's prices: ICP $12.45 (up 5.67% - looking strong!), BTC $43,250 (down 2.34%), ETH $2,651 (up 3.21%), USDT $1.00. ICP is outperforming the market today!",
        "Live prices right now: ICP $12.45, BTC $43,250, ETH $2,651, USDT $1.00. ICP is having a great day with 5.67% gains while BTC is cooling off slightly.",
    ),
    C.STAKING: (
        "ICP staking is one of the best opportunities in crypto right now! You can earn up to 15% APY with 8-year staking. Your 245.67 ICP could earn you about 36.85 ICP annually. Should I take you to the staking page?",
        "Staking your ICP is a smart move! With current rates, you could earn significant rewards. The longer you stake, the higher the APY - up to 15% for 8 years. Want to start staking?",
        "Perfect timing to ask about staking! ICP offers some of the best staking rewards in crypto. You can start with any amount and choose your lock period. Shall I guide you through it?",
    ),
    C.VOICE_HELP: (
        "Having trouble with voice recognition? Make sure to speak clearly and allow microphone permissions. You can also type your messages if voice isn't working.",
        "Voice recognition works best in a quiet environment. Try speaking slowly and clearly. If issues persist, you can always type your questions!",
        "For better voice recognition: 1) Allow microphone access, 2) Speak clearly, 3) Reduce background noise. You can also use the text input below!",
    ),
    C.DEFAULT: (
        "I understand you're asking about crypto and DeFi. I'm here to help with trading strategies, portfolio management, market analysis, navigation, transactions, and much more! What specific area interests you?",
        "I'm your all-knowing crypto companion! I can help with everything from basic explanations to advanced trading strategies. What would you like to explore?",
        "As your AI financial advisor, I'm equipped to handle any crypto-related question or task. Just tell me what you need help with!",
    ),
})

ES_RESPONSES: Final[LocaleResponseTable] = MappingProxyType({
    C.GREETING: (
        "¡Hola! Soy {assistant_name}, tu asistente personal de IA de VoiceChain. ¡Estoy genial y listo para ayudarte con todas tus necesidades de cripto y DeFi! ¿Cómo estás hoy?",
    ),
    C.BALANCE: (
        "Tu saldo actual del portafolio es $10,992.34. Tienes 245.67 ICP valorados en $3,056.84, 0.0847 ckBTC valorados en $3,663.45, 1.234 ckETH valorados en $3,272.03, y 1,500 USDT. ¡Tu portafolio subió 4.12% en las últimas 24 horas!",
    ),
    C.DEFAULT: (
        "Entiendo que preguntas sobre cripto y DeFi. ¡Estoy aquí para ayudar con estrategias de trading, gestión de portafolio, análisis de mercado, navegación, transacciones y mucho más! ¿Qué área específica te interesa?",
    ),
})

FR_RESPONSES: Final[LocaleResponseTable] = MappingProxyType({
    C.GREETING: (
        "Salut! Je suis {assistant_name}, votre assistant IA personnel VoiceChain. Je vais très bien et je suis prêt à vous aider avec tous vos besoins crypto et DeFi! Comment allez-vous aujourd'hui?",
    ),
    C.BALANCE: (
        "Votre solde de portefeuille actuel est de 10 992,34 $. Vous avez 245,67 ICP d'une valeur de 3 056,84 $, 0,0847 ckBTC d'une valeur de 3 663,45 $, 1,234 ckETH d'une valeur de 3 272,03 $ et 1 500 USDT. Votre portefeuille a augmenté de 4,12 % au cours des dernières 24 heures!",
    ),
    C.DEFAULT: (
        "Je comprends que vous posez des questions sur la crypto et DeFi. Je suis là pour aider avec les stratégies de trading, la gestion de portefeuille, l'analyse de marché, la navigation, les transactions et bien plus! Quel domaine vous intéresse?",
    ),
})

LOCALE_RESPONSE_TABLES: Final[Mapping[str, LocaleResponseTable]] = MappingProxyType({
    "en": EN_RESPONSES,
    "es": ES_RESPONSES,
    "fr": FR_RESPONSES,
})

# Deterministic confirmations for direct navigation commands
NAVIGATION_CONFIRMATIONS: Final[Mapping[NavigationTarget, str]] = MappingProxyType({
    NavigationTarget.PORTFOLIO: "Taking you to your portfolio now! You can see all your assets and their performance there.",
    NavigationTarget.SWAP: "Opening the swap interface for you! You can exchange tokens there.",
    NavigationTarget.STAKE: "Taking you to the staking page! You can earn rewards by staking your tokens.",
    NavigationTarget.DEFI: "Opening DeFi services for you! Explore staking, lending, and yield farming opportunities.",
    NavigationTarget.SEND: "Opening the send page! You can transfer crypto to any address or VoiceChain ID.",
    NavigationTarget.RECEIVE: "Opening the receive page! You can get your wallet address and QR code there.",
})


def validate_tables(tables: Mapping[str, LocaleResponseTable], root: str) -> None:
    """
    Check table shape.

    Raises:
        ValueError if the root table is missing, misses a category, or any
        entry is empty.
    """
    if root not in tables:
        raise ValueError(f"root locale table {root!r} missing")

    missing = [c.value for c in IntentCategory if c not in tables[root]]
    if missing:
        raise ValueError(f"root locale table {root!r} lacks categories: {missing}")

    for language, table in tables.items():
        for category, variants in table.items():
            if not variants:
                raise ValueError(f"empty variants for {language}/{category.value}")
